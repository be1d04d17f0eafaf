"""
Utilities: logging and file helpers.
"""
from .logger import info, success, warning, error, debug, get_logger

__all__ = [
    "info",
    "success",
    "warning",
    "error",
    "debug",
    "get_logger",
]
