"""Utility functions."""

from .console import console
from .logging import set_log_level, setup_logging

__all__ = [
    "console",
    "set_log_level",
    "setup_logging",
]
