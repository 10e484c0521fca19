"""Logging utilities for gemfile-parser.

All package loggers are children of the ``gemfile_parser`` logger, which owns
a single rich handler writing to stderr. Standard output is left to the CLI
so JSON results can be piped.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_PREFIX = "gemfile_parser"

LOG_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "debug": "dim",
})

_loggers: Dict[str, "ParserLogger"] = {}


class ParserLogger:
    """Named logger under the package logger."""

    def __init__(self, name: str) -> None:
        _package_logger()
        self.name = name
        self.logger = logging.getLogger(f"{LOGGER_PREFIX}.{name}")

    def info(self, msg: str, **kwargs: Any) -> None:
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self.logger.debug(msg, extra=kwargs)


def _package_logger() -> logging.Logger:
    """Return the package logger, attaching its rich handler on first use."""
    logger = logging.getLogger(LOGGER_PREFIX)
    if any(isinstance(handler, RichHandler) for handler in logger.handlers):
        return logger

    handler = RichHandler(
        console=Console(stderr=True, theme=LOG_THEME),
        show_time=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%X]"))

    logger.addHandler(handler)
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)
    logger.propagate = False
    return logger


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Setup logging configuration for gemfile-parser.

    Args:
        level: Logging level
        log_file: Optional log file path
        verbose: Enable verbose logging
    """
    if verbose:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            *([logging.FileHandler(log_file)] if log_file else [])
        ]
    )

    # child loggers inherit this level
    _package_logger().setLevel(level)


def get_logger(name: str) -> ParserLogger:
    """Get the gemfile-parser logger for a component.

    Args:
        name: Component name, e.g. ``GemfileParser``

    Returns:
        Shared logger instance for that name
    """
    if name not in _loggers:
        _loggers[name] = ParserLogger(name)
    return _loggers[name]
