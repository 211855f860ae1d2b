from __future__ import annotations

"""Bind named configuration types to TOML/YAML/JSON files."""

from .automaton import Configurautomaton, ImmutableLoadedConfig, LoadedConfig
from .errors import (
    ConfigurationDescriptorMissing,
    ConfigurationNotRegistered,
    ConfigurautomatonError,
    HandleClosed,
    LoadFailed,
    PathNotRegistered,
    UnsupportedFormat,
)
from .registry import configuration

__all__ = [
    "Configurautomaton",
    "LoadedConfig",
    "ImmutableLoadedConfig",
    "configuration",
    "ConfigurautomatonError",
    "ConfigurationDescriptorMissing",
    "ConfigurationNotRegistered",
    "HandleClosed",
    "LoadFailed",
    "PathNotRegistered",
    "UnsupportedFormat",
]
