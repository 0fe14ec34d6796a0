"""Process-wide service state.

Built once in the application lifespan and stored on ``app.state.services``.
``initialize`` is init-once: the first call installs log capture and records
the start time, later calls are no-ops.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional

from ..utils.log_buffer import LogBuffer, LogBufferHandler
from .logging_config import APP_LOGGER

logger = logging.getLogger(__name__)


class ServiceState:
    def __init__(self, log_buffer_max_lines: int = 200, capture_loggers: Optional[List[str]] = None) -> None:
        self.log_buffer = LogBuffer(max_lines=log_buffer_max_lines)
        self.capture_loggers = capture_loggers or [APP_LOGGER]
        self.started_at: Optional[datetime] = None
        self._handler: Optional[LogBufferHandler] = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self.started_at is not None

    def initialize(self, level: int = logging.INFO) -> bool:
        """Install log capture and mark the service as started.

        Returns True on the first call, False when already initialized.
        """
        with self._lock:
            if self.started_at is not None:
                return False
            self._handler = LogBufferHandler(self.log_buffer, level=level)
            for name in self.capture_loggers:
                logging.getLogger(name).addHandler(self._handler)
            self.started_at = datetime.now(timezone.utc)
        logger.info("Service state initialized (capturing %s)", ", ".join(self.capture_loggers))
        return True

    def shutdown(self) -> None:
        with self._lock:
            if self._handler is not None:
                for name in self.capture_loggers:
                    logging.getLogger(name).removeHandler(self._handler)
            self._handler = None
            self.started_at = None
