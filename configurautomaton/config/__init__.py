from __future__ import annotations

"""Settings for the package itself (format options, logging, preset paths).

Settings files may be TOML, YAML or JSON; the format is picked by extension
just like for managed configuration files.
"""

from pathlib import Path
from typing import Any, Dict, Iterable

from configurautomaton.errors import LoadFailed
from configurautomaton.formats import resolve_format
from configurautomaton.handle import ReadOnlyHandle

from .overrides import apply_overrides
from .schema import AutomatonCfg, FormatCfg, LoggingCfg  # noqa: E402

__all__ = ["load", "AutomatonCfg", "FormatCfg", "LoggingCfg"]


def load(path: str | Path, overrides: Iterable[str] | None = None) -> AutomatonCfg:
    """Load a settings file, apply ``key=value`` overrides and validate."""
    data = _load_raw(path)
    apply_overrides(data, overrides)
    return AutomatonCfg.from_dict(data)


def _load_raw(path: str | Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise LoadFailed(path, "settings file not found")
    handle = ReadOnlyHandle(path, resolve_format(path)).load()
    return dict(handle.document)
