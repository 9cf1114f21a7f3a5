"""Background delivery of analysis events to a logging sink"""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock
from typing import List, Optional

from config import logger
from src.core import LogEvent
from src.core.ports.analysis import ILogSink

class EventDispatcher:
    """
    Delivers events on a single worker thread

    emit() returns immediately. Delivery failures are logged and retried up to
    max_retries times, then dropped; they never reach the caller.
    """

    def __init__(self, sink: ILogSink, max_retries: int = 0) -> None:
        self.sink = sink
        self.max_retries = max(0, max_retries)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="event-dispatch")
        self._pending: List[Future] = []
        self._lock = Lock()

    def _deliver(self, event: LogEvent) -> bool:
        for attempt in range(self.max_retries + 1):
            try:
                self.sink.log(event)
                return True
            except Exception as e:
                logger.warning(
                    f"Event logging failed (attempt {attempt + 1}/{self.max_retries + 1}): {e}"
                )
        return False

    def emit(self, event: LogEvent) -> None:
        """Queue an event for delivery"""
        try:
            future = self._executor.submit(self._deliver, event)
        except RuntimeError:
            logger.warning("Event dispatcher is closed, dropping event")
            return
        with self._lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait for queued deliveries to finish"""
        with self._lock:
            pending = list(self._pending)
        wait(pending, timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
