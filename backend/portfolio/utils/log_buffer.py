"""
In-memory ring buffer of recent application log records.

Backs the admin debug log view (GET /api/v1/debug/logs). Thread-safe, since
uvicorn worker threads and the event loop may both emit records.
"""
from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

MIN_LINES = 10
MAX_LINES = 5000

_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    level: str
    logger: str
    message: str

    def format(self) -> str:
        ts = self.timestamp.strftime("%H:%M:%S")
        return f"[{ts}] [{self.level}] [{self.logger}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level,
            "logger": self.logger,
            "message": self.message,
        }


def _clamp(value: int) -> int:
    return max(MIN_LINES, min(MAX_LINES, value))


class LogBuffer:
    """Circular buffer holding the last ``max_lines`` entries."""

    def __init__(self, max_lines: int = 200) -> None:
        self._max_lines = _clamp(max_lines)
        self._buffer: deque[LogEntry] = deque(maxlen=self._max_lines)
        self._lock = threading.Lock()

    @property
    def max_lines(self) -> int:
        return self._max_lines

    @max_lines.setter
    def max_lines(self, value: int) -> None:
        with self._lock:
            self._max_lines = _clamp(value)
            # keep the most recent entries
            self._buffer = deque(self._buffer, maxlen=self._max_lines)

    def append(self, level: str, message: str, logger: str = "app") -> None:
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc),
            level=level.upper(),
            logger=logger,
            message=message,
        )
        with self._lock:
            self._buffer.append(entry)

    def entries(self, count: Optional[int] = None, level: Optional[str] = None) -> List[LogEntry]:
        """Return entries oldest first, optionally filtered by level and limited to the last ``count``."""
        with self._lock:
            items = list(self._buffer)
        if level:
            wanted = level.upper()
            items = [e for e in items if e.level == wanted]
        if count is not None:
            items = items[-count:] if count > 0 else []
        return items

    def lines(self, count: Optional[int] = None) -> List[str]:
        return [e.format() for e in self.entries(count)]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)


class LogBufferHandler(logging.Handler):
    """Logging handler that mirrors records into a LogBuffer."""

    def __init__(self, buffer: LogBuffer, level: int = logging.INFO) -> None:
        super().__init__(level)
        self.buffer = buffer

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _LEVEL_NAMES.get(record.levelno, "INFO")
            self.buffer.append(level, record.getMessage(), logger=record.name)
        except Exception:
            self.handleError(record)
