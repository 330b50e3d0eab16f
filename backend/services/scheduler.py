"""
Tick schedulers.

The engine never schedules itself: a host hands a callback to one of these
and the scheduler decides when it runs. IntervalScheduler fires on a real
fixed period; ManualScheduler fires only when told to, which lets tests
step a game synchronously.
"""

import logging
import threading
from typing import Callable, Optional

from domain.constants import TICK_INTERVAL_MS

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickScheduler:
    """Interface: start(callback) replaces any running stream; cancel() stops it."""

    def start(self, callback: TickCallback) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError

    @property
    def is_running(self) -> bool:
        raise NotImplementedError


# Not built on `schedule`: it only runs jobs when polled and cannot stop a 120 ms stream on demand.
class IntervalScheduler(TickScheduler):
    """
    Calls the callback every interval_ms on a daemon thread.

    Starting again cancels the previous stream first, so at most one stream
    is ever live. A callback that raises is logged and ends the stream.
    """

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive.")
        self.interval = interval_ms / 1000.0
        self._lock = threading.Lock()
        self._stop: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    def start(self, callback: TickCallback) -> None:
        with self._lock:
            self._cancel_locked()
            stop = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(callback, stop),
                name="snake-ticker",
                daemon=True,
            )
            self._stop = stop
            self._thread = thread
            thread.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._stop is not None and not self._stop.is_set()

    def _cancel_locked(self) -> None:
        # Not joined: the ticker may be waiting on a lock held by our caller.
        if self._stop is not None:
            self._stop.set()
        self._stop = None
        self._thread = None

    def _run(self, callback: TickCallback, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            try:
                callback()
            except Exception:
                logger.exception("Tick callback failed; stopping the ticker")
                stop.set()
                return


class ManualScheduler(TickScheduler):
    """Holds the callback until fire() is called."""

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self.fired = 0

    def start(self, callback: TickCallback) -> None:
        self._callback = callback

    def cancel(self) -> None:
        self._callback = None

    @property
    def is_running(self) -> bool:
        return self._callback is not None

    def fire(self, times: int = 1) -> int:
        """Run up to `times` ticks, stopping early if cancelled. Returns ticks run."""
        ran = 0
        for _ in range(times):
            callback = self._callback
            if callback is None:
                break
            callback()
            ran += 1
            self.fired += 1
        return ran
