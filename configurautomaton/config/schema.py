from __future__ import annotations

"""Settings schema using Pydantic for validation and type-safety."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

__all__ = [
    "FormatCfg",
    "LoggingCfg",
    "AutomatonCfg",
]


class FormatCfg(BaseModel):
    json_indent: Optional[int] = 4
    json_sort_keys: bool = False
    yaml_default_flow_style: bool = False
    yaml_sort_keys: bool = False


class LoggingCfg(BaseModel):
    level: str = "info"
    suppress: list[str] = Field(default_factory=lambda: ["urllib3", "asyncio"])

    @field_validator("level")
    def check_level(cls, v: str) -> str:
        if v.lower() not in {"debug", "info", "warning", "error", "fatal"}:
            raise ValueError(f"Unknown logging level: {v}")
        return v.lower()


class AutomatonCfg(BaseModel):
    autosave: bool = True
    encoding: str = "utf-8"
    formats: FormatCfg = Field(default_factory=FormatCfg)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)
    # path name -> directory, registered by Configurautomaton.from_settings
    paths: Dict[str, str] = Field(default_factory=dict)

    raw: Dict[str, Any] | None = None

    @field_validator("logging", mode="before")
    def build_logging_config(cls, v: Any) -> Any:
        """Allow logging to be specified as a bare level string."""
        if isinstance(v, str):
            return LoggingCfg(level=v)
        return v

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AutomatonCfg":
        # Legacy flat key
        if "log_level" in d:
            d.setdefault("logging", {})
            if isinstance(d["logging"], dict):
                d["logging"]["level"] = d.pop("log_level")
            else:
                d.pop("log_level")

        return cls(**d, raw=d)
