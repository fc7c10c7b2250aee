"""
Logging setup plus a gesture/injection event log.
"""

import os
import time
import logging
import logging.handlers
from collections import deque
from functools import wraps

CONSOLE_FORMAT = "%(asctime)s  %(levelname)-5s  %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)-32s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure the root logger.

    The console gets ``level``; the optional rotating file always records
    DEBUG so a session can be replayed gesture by gesture.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(root.level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console)

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_size_mb * 1024 * 1024, backupCount=backup_count)
        rotating.setLevel(logging.DEBUG)
        rotating.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(rotating)
        # The file captures DEBUG even when the console is quieter
        root.setLevel(logging.DEBUG)

    return root


class GestureLogger:
    """Records recognized gestures and injection outcomes for a session."""

    def __init__(self, max_history: int = 500):
        self.logger = logging.getLogger("gesture_events")
        self._history = deque(maxlen=max_history)
        self._total = 0
        self._injected = 0
        self._failed = 0

    def log_gesture(self, event, latency_ms=None):
        """Record a recognized GestureEvent and the time it took to classify."""
        self._total += 1
        self._history.append({
            "timestamp": time.time(),
            "gesture": event.kind.value,
            "x": event.x,
            "y": event.y,
            "latency_ms": latency_ms,
        })
        latency = "N/A" if latency_ms is None else f"{latency_ms:.2f}ms"
        self.logger.info("Gesture %-12s at (%.3f, %.3f) | classify %s",
                         event.kind.value, event.x, event.y, latency)

    def log_injection(self, gesture_name, success=True, detail=""):
        """Record whether the pointer action for a gesture reached the host."""
        if success:
            self._injected += 1
            self.logger.info("Injected %-12s %s", gesture_name, detail)
        else:
            self._failed += 1
            self.logger.warning("Injection of %-12s failed %s", gesture_name, detail)

    def get_history(self, last_n=None):
        history = list(self._history)
        return history[-last_n:] if last_n else history

    @property
    def total_gestures(self) -> int:
        return self._total

    @property
    def injection_stats(self) -> dict:
        return {"injected": self._injected, "failed": self._failed}


def log_timing(func):
    """Log the wall time of each call at DEBUG."""
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    def timed(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            logger.debug("%s: %.2fms", func.__qualname__,
                         (time.perf_counter() - start) * 1000)

    return timed
