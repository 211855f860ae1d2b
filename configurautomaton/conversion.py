from __future__ import annotations

"""Mapping between parsed documents and configuration objects.

pydantic does the heavy lifting for ``BaseModel`` subclasses and dataclasses.
Plain dicts are updated in place, anything else is mapped attribute by
attribute.
"""

import copy
import logging
from dataclasses import is_dataclass
from functools import lru_cache
from typing import Any, Dict, Mapping, TypeVar

from pydantic import BaseModel, TypeAdapter

from configurautomaton.utils.io import public_fields, to_plain

__all__ = ["ObjectConverter"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(tp: type) -> TypeAdapter:
    return TypeAdapter(tp)


def _is_typed(obj: Any) -> bool:
    return isinstance(obj, BaseModel) or (is_dataclass(obj) and not isinstance(obj, type))


class ObjectConverter:
    """Converts documents to objects and back."""

    def to_object(self, document: Mapping[str, Any], instance: T) -> T:
        """Populate *instance* from *document* and return the populated value.

        Typed instances are re-validated, so the returned object is a new one;
        its current field values act as defaults for keys missing from the
        document. Raises ``pydantic.ValidationError`` on type mismatches.
        """

        if _is_typed(instance):
            adapter = _adapter(type(instance))
            merged = {**adapter.dump_python(instance, by_alias=True), **document}
            return adapter.validate_python(merged)

        if isinstance(instance, dict):
            instance.update(copy.deepcopy(dict(document)))
            return instance

        public = set(public_fields(instance, include_unset=True))
        for key, value in document.items():
            if key in public:
                setattr(instance, key, copy.deepcopy(value))
            else:
                logger.debug("Ignoring key %r unknown to %s", key, type(instance).__name__)
        return instance

    def to_document(self, obj: Any) -> Dict[str, Any]:
        """Dump *obj* into a JSON-compatible mapping."""

        if _is_typed(obj):
            return _adapter(type(obj)).dump_python(obj, mode="json", by_alias=True)
        plain = to_plain(obj)
        if not isinstance(plain, dict):
            raise TypeError(f"{type(obj).__name__} does not map to a document")
        return plain
