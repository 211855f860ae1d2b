from __future__ import annotations

"""Exception taxonomy.

Every error raised by the package derives from :class:`ConfigurautomatonError`
and additionally from the closest builtin, so callers can catch either.
"""

from pathlib import Path
from typing import Any, Iterable

__all__ = [
    "ConfigurautomatonError",
    "ConfigurationDescriptorMissing",
    "PathNotRegistered",
    "ConfigurationNotRegistered",
    "LoadFailed",
    "UnsupportedFormat",
    "HandleClosed",
]


class ConfigurautomatonError(Exception):
    """Base class for all package errors."""


class ConfigurationDescriptorMissing(ConfigurautomatonError, TypeError):
    def __init__(self, descriptor: Any, reason: str | None = None):
        self.descriptor = descriptor
        name = getattr(descriptor, "__name__", repr(descriptor))
        msg = reason or f"{name} seems to be missing the @configuration(file=...) declaration."
        super().__init__(msg)


class PathNotRegistered(ConfigurautomatonError, LookupError):
    def __init__(self, path_name: str, available: Iterable[str] = ()):
        self.path_name = path_name
        super().__init__(
            f"A path couldn't be found with a corresponding name of: {path_name!r}. "
            f"Did you register it? Available: {sorted(available)}"
        )


class ConfigurationNotRegistered(ConfigurautomatonError, LookupError):
    def __init__(self, file_name: str, available: Iterable[str] = ()):
        self.file_name = file_name
        super().__init__(
            f"A configuration object relating to the file: {file_name!r} wasn't found. "
            f"Did you register it? Available: {sorted(available)}"
        )


class LoadFailed(ConfigurautomatonError):
    def __init__(self, path: str | Path, reason: str | None = None):
        self.path = Path(path)
        msg = f"File couldn't be loaded: {self.path}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class UnsupportedFormat(ConfigurautomatonError, ValueError):
    def __init__(self, path: str | Path, extensions: Iterable[str] = (".toml", ".yaml", ".json")):
        self.path = Path(path)
        super().__init__(
            f"A format for the file: {self.path} couldn't be found. "
            f"Looked for extensions: {', '.join(extensions)}."
        )


class HandleClosed(ConfigurautomatonError, RuntimeError):
    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(f"Handle for {self.path} is already closed")
