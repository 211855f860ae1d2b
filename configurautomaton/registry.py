from __future__ import annotations

"""Name-keyed registries for directories and configuration factories.

Both registries are safe for concurrent registration and lookup, but no
ordering is guaranteed between a lookup and a racing registration.
"""

import inspect
import logging
import threading
from typing import Any, Callable, Dict, Generic, Optional, Sequence, TypeVar

from configurautomaton.errors import ConfigurationDescriptorMissing

__all__ = [
    "configuration",
    "declared_file",
    "PathRegistry",
    "ConfigurationRegistry",
]

logger = logging.getLogger(__name__)

V = TypeVar("V")

_FILE_ATTR = "__configuration_file__"


def configuration(file: str):  # noqa: D401
    """Class decorator declaring the file a configuration type corresponds to.

    *file* is the file name plus extension, not a full path::

        @configuration(file="settings.toml")
        class Settings(BaseModel):
            retries: int = 0
    """

    if not file:
        raise ValueError("@configuration needs a non-empty file name")

    def wrap(cls):
        setattr(cls, _FILE_ATTR, file)
        return cls

    return wrap


def declared_file(descriptor: Any) -> Optional[str]:
    """Return the file name declared with :func:`configuration`, if any."""
    return getattr(descriptor, _FILE_ATTR, None)


class _LockedRegistry(Generic[V]):
    def __init__(self) -> None:
        self._entries: Dict[str, V] = {}
        self._lock = threading.Lock()

    def _put(self, key: str, value: V) -> None:
        with self._lock:
            previous = self._entries.get(key)
            self._entries[key] = value
        if previous is not None and previous is not value:
            logger.debug("%s: overwriting entry for %r", self.__class__.__name__, key)

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            return self._entries.get(key)

    def names(self) -> Sequence[str]:
        with self._lock:
            return sorted(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class PathRegistry(_LockedRegistry[str]):
    """Symbolic path name -> directory string."""

    def register(self, path_name: str, directory: str) -> None:
        # Existence is checked when a file is loaded, not here.
        self._put(path_name, str(directory))


def _check_factory(descriptor: Any) -> None:
    if not callable(descriptor):
        raise ConfigurationDescriptorMissing(
            descriptor, f"{descriptor!r} is not a class or zero-argument factory"
        )
    if inspect.isclass(descriptor):
        return
    try:
        inspect.signature(descriptor).bind()
    except TypeError as exc:
        name = getattr(descriptor, "__name__", repr(descriptor))
        raise ConfigurationDescriptorMissing(
            descriptor, f"{name} must be callable without arguments"
        ) from exc
    except ValueError:
        # builtins without an inspectable signature
        pass


class ConfigurationRegistry(_LockedRegistry[Callable[[], Any]]):
    """Symbolic file name -> zero-argument factory of a configuration value."""

    def register(self, file_name: str, descriptor: Callable[[], Any]) -> None:
        if not file_name:
            raise ConfigurationDescriptorMissing(descriptor, "file name must not be empty")
        _check_factory(descriptor)
        self._put(file_name, descriptor)

    def register_declared(self, descriptor: Callable[[], Any]) -> str:
        """Register a type decorated with :func:`configuration`; return its file name."""
        file_name = declared_file(descriptor)
        if not file_name:
            raise ConfigurationDescriptorMissing(descriptor)
        self.register(file_name, descriptor)
        return file_name
