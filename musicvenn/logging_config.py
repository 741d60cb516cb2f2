"""
Logging setup for the musicvenn command line.

Modules log through `logging.getLogger(__name__)`; `setup_logging` attaches
the handlers once, on the package logger.
"""
import logging
import sys
from typing import Optional, Union

from musicvenn.errors import ConfigError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def parse_level(level: Union[int, str]) -> int:
    """Level number for a name like "debug"; ConfigError for unknown names."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ConfigError(f"Unknown log level {level!r}; use DEBUG, INFO, WARNING or ERROR.")
    return value


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Send the 'musicvenn' logs to stdout, and to `log_file` when given.
    Calling it again replaces the previous handlers.
    """
    level = parse_level(level)
    logger = logging.getLogger("musicvenn")
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging at %s%s.", logging.getLevelName(level), f" to {log_file}" if log_file else "")
