from __future__ import annotations

"""Registry-driven loading and saving of configuration files.

Typical lifecycle::

    automaton = Configurautomaton()
    automaton.register_path("cfg", "/etc/app")
    automaton.register(Settings)               # @configuration(file="settings.toml")

    loaded = automaton.load("cfg", "settings.toml")
    loaded.configuration.retries = 5
    automaton.save(loaded)

    automaton.shutdown()                       # flush whatever was not saved
"""

import itertools
import logging
import threading
import weakref
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Generic, List, Sequence, TypeVar

from pydantic import ValidationError

from configurautomaton.config.schema import AutomatonCfg
from configurautomaton.conversion import ObjectConverter
from configurautomaton.errors import (
    ConfigurationNotRegistered,
    LoadFailed,
    PathNotRegistered,
)
from configurautomaton.formats import ConfigFormat, resolve_format
from configurautomaton.handle import FileHandle, ReadOnlyHandle
from configurautomaton.registry import ConfigurationRegistry, PathRegistry

__all__ = ["Configurautomaton", "LoadedConfig", "ImmutableLoadedConfig"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

_handle_ids = itertools.count(1)


@dataclass(eq=False)
class LoadedConfig(Generic[T]):
    """A live configuration object paired with its open, writable file."""

    file_name: str
    configuration: T
    config: FileHandle
    handle_id: int = field(default_factory=lambda: next(_handle_ids))

    @property
    def path(self) -> Path:
        return self.config.path


@dataclass(eq=False, frozen=True)
class ImmutableLoadedConfig(Generic[T]):
    """A configuration object paired with a read-only view of its file."""

    file_name: str
    configuration: T
    config: ReadOnlyHandle

    @property
    def path(self) -> Path:
        return self.config.path


class Configurautomaton:
    """Binds registered configuration types to files in registered directories."""

    def __init__(self, settings: AutomatonCfg | None = None):
        self.settings = settings or AutomatonCfg()
        self.paths = PathRegistry()
        self.configurations = ConfigurationRegistry()
        self.converter = ObjectConverter()
        # handle id -> weakly referenced LoadedConfig, only used by shutdown()
        self._open: "weakref.WeakValueDictionary[int, LoadedConfig[Any]]" = weakref.WeakValueDictionary()
        self._open_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: AutomatonCfg) -> "Configurautomaton":
        """Build an instance and register the ``paths`` table of *settings*."""
        automaton = cls(settings)
        for path_name, directory in settings.paths.items():
            automaton.register_path(path_name, directory)
        return automaton

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, descriptor: Callable[[], T]) -> str:
        """Register a type decorated with ``@configuration(file=...)``.

        Returns the declared file name. Raises ``ConfigurationDescriptorMissing``
        when the type declares none.
        """
        file_name = self.configurations.register_declared(descriptor)
        logger.debug("Registered configuration %s -> %s", file_name, descriptor)
        return file_name

    def register_configuration(self, file_name: str, descriptor: Callable[[], T]) -> None:
        """Bind *file_name* to a class or zero-argument factory."""
        self.configurations.register(file_name, descriptor)
        logger.debug("Registered configuration %s -> %s", file_name, descriptor)

    def register_path(self, path_name: str, directory: str | Path) -> None:
        """Bind *path_name* to *directory*; the directory may not exist yet."""
        self.paths.register(path_name, str(directory))
        logger.debug("Registered path %s -> %s", path_name, directory)

    def list_paths(self) -> Sequence[str]:
        return self.paths.names()

    def list_configurations(self) -> Sequence[str]:
        return self.configurations.names()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _resolve(self, path_name: str, file_name: str):
        directory = self.paths.get(path_name)
        if directory is None:
            raise PathNotRegistered(path_name, self.paths.names())

        descriptor = self.configurations.get(file_name)
        if descriptor is None:
            raise ConfigurationNotRegistered(file_name, self.configurations.names())

        file = Path(directory) / file_name
        return file, descriptor, self._format_for(file)

    def _format_for(self, file: Path) -> ConfigFormat:
        return resolve_format(file, **self.settings.formats.model_dump())

    def _populate(self, file: Path, descriptor: Callable[[], T], document: Any) -> T:
        try:
            return self.converter.to_object(document, descriptor())
        except (ValidationError, TypeError, ValueError) as exc:
            raise LoadFailed(file, f"cannot map onto {getattr(descriptor, '__name__', descriptor)}: {exc}") from exc

    def load(self, path_name: str, file_name: str) -> LoadedConfig[Any]:
        """Load a mutable configuration file.

        Raises ``PathNotRegistered``, ``ConfigurationNotRegistered``,
        ``UnsupportedFormat`` or ``LoadFailed``.
        """
        file, descriptor, fmt = self._resolve(path_name, file_name)

        handle = FileHandle(file, fmt, autosave=self.settings.autosave, encoding=self.settings.encoding)
        handle.load()
        obj = self._populate(file, descriptor, handle.document)

        loaded = LoadedConfig(file_name=file_name, configuration=obj, config=handle)
        with self._open_lock:
            self._open[loaded.handle_id] = loaded
        logger.info("Loaded %s from %s (%s)", file_name, file, fmt.name)
        return loaded

    def load_immutable(self, path_name: str, file_name: str) -> ImmutableLoadedConfig[Any]:
        """Load a configuration file through a read-only handle.

        The result is not tracked: it has no save path and nothing to flush.
        """
        file, descriptor, fmt = self._resolve(path_name, file_name)

        handle = ReadOnlyHandle(file, fmt, encoding=self.settings.encoding).load()
        obj = self._populate(file, descriptor, handle.document)

        logger.info("Loaded %s (read-only) from %s (%s)", file_name, file, fmt.name)
        return ImmutableLoadedConfig(file_name=file_name, configuration=obj, config=handle)

    # ------------------------------------------------------------------
    # Persistence & lifecycle
    # ------------------------------------------------------------------

    def _flush(self, loaded: LoadedConfig[Any]) -> None:
        loaded.config.merge(self.converter.to_document(loaded.configuration))
        loaded.config.save()
        loaded.config.close()

    def save(self, loaded: LoadedConfig[Any]) -> None:
        """Write the object back to its file and close the handle.

        The handle must not be reused afterwards; doing so raises
        ``HandleClosed``.
        """
        self._flush(loaded)
        with self._open_lock:
            self._open.pop(loaded.handle_id, None)
        logger.info("Saved %s to %s", loaded.file_name, loaded.path)

    def open_handles(self) -> List[LoadedConfig[Any]]:
        """Currently tracked configs that have not been collected yet."""
        with self._open_lock:
            return list(self._open.values())

    def shutdown(self) -> None:
        """Save and close every tracked config; call when the program exits.

        Best effort: a failing entry is logged and the remaining ones are
        still processed. The tracker is always left empty.
        """
        with self._open_lock:
            pending = list(self._open.values())
            self._open.clear()

        flushed = 0
        for loaded in pending:
            if loaded.config.closed:
                continue
            try:
                self._flush(loaded)
            except Exception as e:
                logger.error("Failed to flush %s on shutdown: %s", loaded.path, e, exc_info=True)
            else:
                flushed += 1
        logger.info("Shutdown complete (%d config(s) flushed)", flushed)

    def __repr__(self) -> str:  # noqa: D401
        return (
            f"Configurautomaton(paths={list(self.list_paths())}, "
            f"configurations={list(self.list_configurations())})"
        )
