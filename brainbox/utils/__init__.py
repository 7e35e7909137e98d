"""Utility modules for the catalog client"""

from .logger import get_logger, setup_logging
from .mixins import LoggerMixin

__all__ = [
    "get_logger",
    "setup_logging",
    "LoggerMixin",
]
