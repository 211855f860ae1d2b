from __future__ import annotations

"""Dotted ``key=value`` overrides applied on top of a parsed document.

Used both for settings files and by ``configurautomaton set``:
  $ configurautomaton set conf/app.toml server.port=8080 debug=true
"""

from typing import Any, Dict, Iterable, List, Tuple

__all__ = ["apply_overrides", "parse_override"]


def _set_nested(cfg: Dict[str, Any], path: List[str], value: Any):  # noqa: D401
    cur = cfg
    for p in path[:-1]:
        nxt = cur.get(p)
        if not isinstance(nxt, dict):
            nxt = cur[p] = {}
        cur = nxt
    cur[path[-1]] = value


def parse_override(ov: str) -> Tuple[str, Any]:
    """Split ``key=value`` and infer the value type."""
    if "=" not in ov:
        raise ValueError(f"Override must be key=value, got: {ov}")
    key, val = ov.split("=", 1)
    key = key.strip()
    if not key or not all(key.split(".")):
        raise ValueError(f"Override key is empty or malformed: {ov}")
    return key, _infer_type(val)


def apply_overrides(cfg_dict: Dict[str, Any], overrides: Iterable[str] | None) -> Dict[str, Any]:
    """Apply CLI-style overrides to *cfg_dict* in place and return it."""
    for ov in overrides or []:
        key, value = parse_override(ov)
        _set_nested(cfg_dict, key.split("."), value)
    return cfg_dict


def _infer_type(v: str):  # noqa: D401
    if v.lower() in {"true", "false"}:  # bool
        return v.lower() == "true"
    try:
        return int(v)
    except ValueError:
        try:
            return float(v)
        except ValueError:
            return v  # string
