"""Non-blocking delivery of progress snapshots."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Generic, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class ProgressChannel(Generic[T]):
    """Deliver the latest published value to a callback on its own thread.

    ``publish`` never blocks on the consumer: it overwrites a single slot,
    so a slow callback only ever sees the newest snapshot and intermediate
    ones are dropped. ``close`` flushes the final snapshot and joins the
    delivery thread.
    """

    def __init__(self, callback: Callable[[T], None], name: str = "devjunk-progress") -> None:
        self._callback = callback
        self._cond = threading.Condition()
        self._latest: T | None = None
        self._pending = False
        self._closed = False
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def publish(self, value: T) -> None:
        with self._cond:
            self._latest = value
            self._pending = True
            self._cond.notify()

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify()
        self._thread.join()

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._pending and not self._closed:
                    self._cond.wait()
                if not self._pending:
                    return
                value = self._latest
                self._pending = False
            try:
                self._callback(value)
            except Exception:
                log.exception("Progress callback failed")

    def __enter__(self) -> ProgressChannel[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ThrottledCallback(Generic[T]):
    """Forward at most one value per *interval* seconds to *callback*.

    ``flush`` forwards the last suppressed value, if any, so consumers
    always end up with the final state.
    """

    def __init__(
        self,
        callback: Callable[[T], None],
        interval: float = 0.05,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._callback = callback
        self._interval = interval
        self._clock = clock
        self._last_emit: float | None = None
        self._suppressed: T | None = None
        self._has_suppressed = False
        self._lock = threading.Lock()

    def __call__(self, value: T) -> None:
        with self._lock:
            now = self._clock()
            if self._last_emit is not None and now - self._last_emit < self._interval:
                self._suppressed = value
                self._has_suppressed = True
                return
            self._last_emit = now
            self._has_suppressed = False
        self._callback(value)

    def flush(self) -> None:
        with self._lock:
            if not self._has_suppressed:
                return
            value = self._suppressed
            self._has_suppressed = False
            self._last_emit = self._clock()
        self._callback(value)
