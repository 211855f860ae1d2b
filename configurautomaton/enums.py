from __future__ import annotations

"""Core enumerations."""

from enum import Enum


class FormatType(str, Enum):
    """Supported on-disk formats, in resolution order."""

    TOML = "toml"
    YAML = "yaml"
    JSON = "json"

    @property
    def extension(self) -> str:
        return f".{self.value}"
