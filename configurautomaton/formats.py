from __future__ import annotations

"""Format plugins and the extension-based resolver.

Parsing is delegated to ``toml``, ``PyYAML`` and the standard ``json`` module.
Each plugin turns text into a top-level mapping and back.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

import toml
import yaml

from configurautomaton.enums import FormatType
from configurautomaton.errors import UnsupportedFormat

__all__ = [
    "ConfigFormat",
    "TomlFormat",
    "YamlFormat",
    "JsonFormat",
    "resolve_format",
    "supported_formats",
]


class ConfigFormat(ABC):
    """Serializer/deserializer for a single file format."""

    type: FormatType

    @property
    def name(self) -> str:
        return self.type.value

    @property
    def extension(self) -> str:
        return self.type.extension

    @abstractmethod
    def loads(self, text: str) -> Dict[str, Any]:
        """Parse *text* into a mapping. Empty documents yield ``{}``."""

    @abstractmethod
    def dumps(self, document: Dict[str, Any]) -> str:
        """Serialize *document* to text."""

    def __repr__(self) -> str:  # noqa: D401
        return f"{self.__class__.__name__}()"


def _ensure_mapping(value: Any, *, name: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"{name} document must be a mapping at top level, got {type(value).__name__}")
    return value


class TomlFormat(ConfigFormat):
    type = FormatType.TOML

    def loads(self, text: str) -> Dict[str, Any]:
        return _ensure_mapping(toml.loads(text), name="TOML")

    def dumps(self, document: Dict[str, Any]) -> str:
        # None has no TOML representation; the encoder drops such keys.
        return toml.dumps(document)


class YamlFormat(ConfigFormat):
    type = FormatType.YAML

    def __init__(self, default_flow_style: bool = False, sort_keys: bool = False):
        self.default_flow_style = default_flow_style
        self.sort_keys = sort_keys

    def loads(self, text: str) -> Dict[str, Any]:
        return _ensure_mapping(yaml.safe_load(text), name="YAML")

    def dumps(self, document: Dict[str, Any]) -> str:
        return yaml.safe_dump(
            document,
            default_flow_style=self.default_flow_style,
            sort_keys=self.sort_keys,
            allow_unicode=True,
        )

    def __repr__(self) -> str:  # noqa: D401
        return f"YamlFormat(default_flow_style={self.default_flow_style}, sort_keys={self.sort_keys})"


class JsonFormat(ConfigFormat):
    type = FormatType.JSON

    def __init__(self, indent: int | None = 4, sort_keys: bool = False):
        self.indent = indent
        self.sort_keys = sort_keys

    def loads(self, text: str) -> Dict[str, Any]:
        if not text.strip():
            return {}
        return _ensure_mapping(json.loads(text), name="JSON")

    def dumps(self, document: Dict[str, Any]) -> str:
        return json.dumps(document, indent=self.indent, sort_keys=self.sort_keys, ensure_ascii=False) + "\n"

    def __repr__(self) -> str:  # noqa: D401
        return f"JsonFormat(indent={self.indent}, sort_keys={self.sort_keys})"


def supported_formats(**options: Any) -> List[ConfigFormat]:
    """Return one plugin per format, in resolution order.

    *options* are the ``FormatCfg`` fields (``json_indent``, ``json_sort_keys``,
    ``yaml_default_flow_style``, ``yaml_sort_keys``); unknown keys are ignored.
    """

    return [
        TomlFormat(),
        YamlFormat(
            default_flow_style=options.get("yaml_default_flow_style", False),
            sort_keys=options.get("yaml_sort_keys", False),
        ),
        JsonFormat(
            indent=options.get("json_indent", 4),
            sort_keys=options.get("json_sort_keys", False),
        ),
    ]


def resolve_format(path: str | Path, **options: Any) -> ConfigFormat:
    """Pick the plugin for *path* by looking at its file name.

    Extensions are checked as substrings in the order toml -> yaml -> json, so
    ``settings.toml.json`` resolves to TOML.
    """

    file_name = Path(path).name
    formats = supported_formats(**options)
    for fmt in formats:
        if fmt.extension in file_name:
            return fmt
    raise UnsupportedFormat(path, [fmt.extension for fmt in formats])
