import logging

from configurautomaton.config.schema import LoggingCfg
from configurautomaton.utils.logging_utils import apply_logging_cfg


def test_apply_level_and_suppress():
    logging.getLogger("noisy.child")
    apply_logging_cfg(LoggingCfg(level="warning", suppress=["noisy"]))
    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("noisy").level == logging.ERROR
    assert logging.getLogger("noisy.child").level == logging.ERROR
    apply_logging_cfg(LoggingCfg(level="info", suppress=[]))
    assert logging.getLogger().level == logging.INFO
