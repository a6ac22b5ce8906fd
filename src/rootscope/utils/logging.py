"""Logging setup for RootScope.

Modules log through ``logging.getLogger(__name__)``; everything below the
``rootscope`` namespace is routed by the handlers installed here. Console
output goes to stderr only, since stdout carries the MCP protocol when the
tool server runs over stdio.
"""

import logging
import sys
from typing import Literal

from ..config import Settings, settings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

NAMESPACE = "rootscope"

# Libraries that log one INFO line per HTTP request or protocol message
NOISY_LIBRARIES = ("httpx", "httpcore", "mcp")

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    config: Settings | None = None,
    console_level: LogLevel = "WARNING",
) -> logging.Logger:
    """Install the stderr handler and, if ``log_file`` is set, a file handler.

    Calling it again replaces the previous handlers.
    """
    config = config or settings
    logger = logging.getLogger(NAMESPACE)
    logger.setLevel(config.log_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def set_log_level(level: LogLevel) -> None:
    """Change the level of every rootscope logger at runtime."""
    logging.getLogger(NAMESPACE).setLevel(level)
