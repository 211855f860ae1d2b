from __future__ import annotations

"""Apply the ``logging`` section of the settings file to the process."""

from typing import Iterable
import logging

from configurautomaton.config.schema import LoggingCfg

__all__ = ["apply_logging_cfg"]

_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
_DATEFMT = "%H:%M:%S"


def _quiet(prefixes: Iterable[str]) -> None:
    """Raise the listed loggers, and every logger below them, to ERROR."""
    prefixes = tuple(prefixes)
    known = list(logging.root.manager.loggerDict)
    for name in known + list(prefixes):
        if any(name == p or name.startswith(f"{p}.") for p in prefixes):
            logging.getLogger(name).setLevel(logging.ERROR)


def apply_logging_cfg(cfg: LoggingCfg) -> None:  # noqa: D401
    """Set the root level, install a stream handler if none exists, quiet noisy loggers."""

    # LoggingCfg validates and lower-cases the level name
    level = logging.getLevelName(cfg.level.upper())
    root = logging.getLogger()

    if any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        root.setLevel(level)
    else:
        logging.basicConfig(level=level, format=_FORMAT, datefmt=_DATEFMT, force=True)

    _quiet(cfg.suppress)
