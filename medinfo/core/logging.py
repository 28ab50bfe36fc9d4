import logging

from .config import get_settings

_formatter = logging.Formatter(
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

_logger = logging.getLogger("medinfo")
_logger.setLevel(get_settings().log_level)
if not _logger.handlers:
    ch = logging.StreamHandler()
    ch.setFormatter(_formatter)
    _logger.addHandler(ch)


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger, e.g. get_logger("store") -> medinfo.store."""
    return _logger.getChild(name)


def set_level(level: str) -> None:
    _logger.setLevel((level or "INFO").upper())
