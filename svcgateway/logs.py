"""Process-wide logger writing timestamped lines."""

from __future__ import annotations

import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import TextIO


class LoggerType(Enum):
    """Where log lines are sent."""

    LOCAL = 0


@dataclass
class LocalLogger:
    """Writes ``[time] [level] [source] [hostname] message`` lines to a stream."""

    source: str
    hostname: str
    stream: TextIO | None = None

    def log_with_level(self, message: str, level: str) -> None:
        stamp = time.strftime("%H:%M:%S")
        out = self.stream if self.stream is not None else sys.stderr
        out.write(f"[{stamp}] [{level}] [{self.source}] [{self.hostname}] {message}\n")
        out.flush()

    def debug(self, message: str) -> None:
        self.log_with_level(message, "DEBUG")

    def info(self, message: str) -> None:
        self.log_with_level(message, "INFO")

    def warn(self, message: str) -> None:
        self.log_with_level(message, "WARN")

    def error(self, message: str) -> None:
        self.log_with_level(message, "ERROR")


_lock = threading.Lock()
_current: LocalLogger | None = None


def init(logger_type: LoggerType, source: str, hostname: str) -> LocalLogger:
    """Install and return the process-wide logger."""
    global _current
    logger = LocalLogger(source, hostname)
    with _lock:
        _current = logger
    return logger


def get_logger() -> LocalLogger:
    """Return the process-wide logger, creating a default one if needed."""
    global _current
    with _lock:
        if _current is None:
            _current = LocalLogger("gateway", "127.0.0.1")
        return _current