"""Logger setup and a writer that funnels plain log lines into it."""

from __future__ import annotations

import logging
import re
import sys

LOGGER_NAME = "sibridge"
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

_STD_LOG_FORMAT = re.compile(
    r"[0-9]{4}/[0-9]{2}/[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2} (?P<msg>.+)", re.S
)
_TIMESTAMP_WIDTH = 20


class _LevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record.lvl = record.levelname.lower()
        return super().format(record)


class _BridgeHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is when each record is emitted."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


def set_log_level(level: str) -> int:
    """Set the package logger's level by name; unknown names mean info."""
    numeric = _LEVELS.get(level.lower(), logging.INFO)
    logging.getLogger(LOGGER_NAME).setLevel(numeric)
    return numeric


def init_logger(level: str = "info") -> logging.Logger:
    """Send package logs to stderr as '[level]: time - message'."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, _BridgeHandler):
            logger.removeHandler(handler)
    handler = _BridgeHandler()
    handler.setFormatter(
        _LevelFormatter("[%(lvl)s]: %(asctime)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(handler)
    set_log_level(level)
    return logger


class StdLogWriter:
    """File-like sink that re-logs timestamped plain log lines at info level."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(LOGGER_NAME)

    def write(self, data: bytes | str) -> int:
        message = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
        if _STD_LOG_FORMAT.search(message):
            message = message[_TIMESTAMP_WIDTH:]
        if message.endswith("\n"):
            message = message[:-1]
        self._logger.info("[gousb] %s", message)
        return len(message)

    def flush(self) -> None:
        """Flush the handlers of the logger this writer feeds."""
        for handler in self._logger.handlers:
            handler.flush()