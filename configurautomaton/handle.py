from __future__ import annotations

"""Backing file handles.

A handle owns the parsed document of one file. ``FileHandle`` is read/write
and persists on mutation when ``autosave`` is set; ``ReadOnlyHandle`` only
exposes lookups.
"""

import copy
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from configurautomaton.errors import HandleClosed, LoadFailed
from configurautomaton.formats import ConfigFormat

__all__ = ["FileHandle", "ReadOnlyHandle"]

logger = logging.getLogger(__name__)

_MISSING = object()


def _split(key: str) -> List[str]:
    parts = key.split(".")
    if not all(parts):
        raise KeyError(f"Invalid dotted key: {key!r}")
    return parts


def _lookup(document: Mapping[str, Any], key: str, default: Any = None) -> Any:
    cur: Any = document
    for part in _split(key):
        if not isinstance(cur, Mapping) or part not in cur:
            return default
        cur = cur[part]
    return cur


class ReadOnlyHandle:
    """Read-only view of a configuration file."""

    def __init__(self, path: str | Path, fmt: ConfigFormat, encoding: str = "utf-8"):
        self.path = Path(path)
        self.format = fmt
        self.encoding = encoding
        self._document: Dict[str, Any] = {}

    def load(self) -> "ReadOnlyHandle":
        """Read and parse the file, raising ``LoadFailed`` on any failure."""
        try:
            text = self.path.read_text(encoding=self.encoding)
        except OSError as exc:
            raise LoadFailed(self.path, exc.strerror or type(exc).__name__) from exc
        except UnicodeDecodeError as exc:
            raise LoadFailed(self.path, f"cannot decode as {self.encoding}: {exc.reason}") from exc
        try:
            self._document = self.format.loads(text)
        except Exception as exc:  # parser errors differ per library
            raise LoadFailed(self.path, f"malformed {self.format.name}: {exc}") from exc
        logger.debug("Loaded %s (%d top-level keys)", self.path, len(self._document))
        return self

    @property
    def document(self) -> Mapping[str, Any]:
        return MappingProxyType(self._document)

    def get(self, key: str, default: Any = None) -> Any:
        return _lookup(self._document, key, default)

    def __contains__(self, key: str) -> bool:
        return _lookup(self._document, key, _MISSING) is not _MISSING

    def __repr__(self) -> str:  # noqa: D401
        return f"{self.__class__.__name__}({str(self.path)!r}, {self.format.name})"


class FileHandle(ReadOnlyHandle):
    """Read/write handle with optional autosave on mutation.

    Concurrent access to the same file from several handles is not
    synchronised.
    """

    def __init__(
        self,
        path: str | Path,
        fmt: ConfigFormat,
        *,
        autosave: bool = True,
        encoding: str = "utf-8",
    ):
        super().__init__(path, fmt, encoding=encoding)
        self.autosave = autosave
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise HandleClosed(self.path)

    def load(self) -> "FileHandle":
        self._check_open()
        super().load()
        return self

    @property
    def document(self) -> Dict[str, Any]:
        """Deep copy of the current document."""
        return copy.deepcopy(self._document)

    def set(self, key: str, value: Any) -> None:
        """Set dotted *key* to *value*, creating intermediate tables."""
        self._check_open()
        parts = _split(key)
        cur = self._document
        for part in parts[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = cur[part] = {}
            cur = nxt
        cur[parts[-1]] = value
        self._on_mutation()

    def remove(self, key: str) -> Any:
        """Remove dotted *key* and return its value (``None`` if absent)."""
        self._check_open()
        parts = _split(key)
        parent = _lookup(self._document, ".".join(parts[:-1])) if len(parts) > 1 else self._document
        if not isinstance(parent, dict) or parts[-1] not in parent:
            return None
        value = parent.pop(parts[-1])
        self._on_mutation()
        return value

    def merge(self, document: Mapping[str, Any]) -> None:
        """Overlay *document* on top of the current one without persisting.

        Keys only present in the file are kept.
        """
        self._check_open()
        self._document.update(copy.deepcopy(dict(document)))

    def save(self) -> None:
        self._check_open()
        text = self.format.dumps(self._document)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding=self.encoding)
        logger.debug("Wrote %s", self.path)

    def close(self) -> None:
        self._closed = True

    def _on_mutation(self) -> None:
        if self.autosave:
            self.save()

    def __repr__(self) -> str:  # noqa: D401
        state = "closed" if self._closed else "open"
        return f"FileHandle({str(self.path)!r}, {self.format.name}, {state})"
