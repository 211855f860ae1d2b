import enum
import inspect
import logging
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, List


logger = logging.getLogger(__name__)

_MISSING = object()


def public_fields(obj: Any, include_unset: bool = False) -> List[str]:
    """Public field names of a plain object, in declaration order.

    Covers class-level annotations (``retries: int = 0``), plain class
    attributes that are not methods or descriptors, and instance attributes.
    Annotated names without a value on *obj* are skipped unless
    *include_unset* is set.
    """
    names: dict = {}
    for klass in reversed(type(obj).__mro__[:-1]):
        for name in inspect.get_annotations(klass):
            names[name] = None
        for name, value in vars(klass).items():
            if callable(value) or isinstance(value, (property, classmethod, staticmethod)):
                continue
            names[name] = None
    for name in getattr(obj, "__dict__", {}):
        names[name] = None
    return [
        n for n in names
        if not n.startswith("_")
        and (include_unset or getattr(obj, n, _MISSING) is not _MISSING)
    ]


def to_plain(obj: Any) -> Any:
    """Recursively convert *obj* into values every format can serialise.

    Plain objects become dicts of their :func:`public_fields`, so class
    defaults that were never reassigned are written as well.
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, enum.Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_plain(asdict(obj))
    if hasattr(obj, "model_dump"):
        return to_plain(obj.model_dump(mode="json"))
    if isinstance(obj, dict):
        return {str(k): to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [to_plain(i) for i in obj]
    if hasattr(obj, "__dict__"):
        return {name: to_plain(getattr(obj, name)) for name in public_fields(obj)}

    logger.debug("Falling back to str() for %s", type(obj).__name__)
    return str(obj)


def flatten(document: dict, prefix: str = "") -> dict:
    """Flatten nested tables into dotted keys: ``{"a": {"b": 1}} -> {"a.b": 1}``."""
    flat = {}
    for key, value in document.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict) and value:
            flat.update(flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat
