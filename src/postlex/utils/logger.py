"""
Logging helpers for the pronunciation stage.

Every module logs through these functions, never through print.
Output format is "[LEVEL] prefix: message"; info/success/debug go to stdout,
warning/error go to stderr. POSTLEX_LOG_LEVEL sets the threshold
(DEBUG, INFO, WARN, ERROR; default INFO).
"""
import os
import sys
from typing import Optional, TextIO

_LEVELS = {"DEBUG": 10, "INFO": 20, "SUCCESS": 20, "WARN": 30, "ERROR": 40}


def _threshold() -> int:
    name = os.getenv("POSTLEX_LOG_LEVEL", "INFO").strip().upper()
    if name == "WARNING":
        name = "WARN"
    return _LEVELS.get(name, _LEVELS["INFO"])


class Logger:
    """Small logger that does not depend on the logging module."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def _format(self, level: str, message: str) -> str:
        if self.prefix:
            return f"[{level}] {self.prefix}: {message}"
        return f"[{level}] {message}"

    def _emit(self, level: str, message: str, stream: Optional[TextIO] = None) -> None:
        # threshold is read per call so tests and .env files can change it at runtime
        if _LEVELS[level] < _threshold():
            return
        print(self._format(level, message), file=stream or sys.stdout)

    def info(self, message: str):
        self._emit("INFO", message)

    def success(self, message: str):
        self._emit("SUCCESS", message)

    def warning(self, message: str):
        self._emit("WARN", message, sys.stderr)

    def error(self, message: str):
        self._emit("ERROR", message, sys.stderr)

    def debug(self, message: str):
        self._emit("DEBUG", message)


_default_logger = Logger()


def info(message: str):
    _default_logger.info(message)


def success(message: str):
    _default_logger.success(message)


def warning(message: str):
    _default_logger.warning(message)


def error(message: str):
    _default_logger.error(message)


def debug(message: str):
    _default_logger.debug(message)


def get_logger(prefix: str = "") -> Logger:
    """Logger whose lines carry the given prefix."""
    return Logger(prefix=prefix)
