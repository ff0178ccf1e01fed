from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)


class DebounceScheduler:
    """Coalesce rapid writes per key.

    Each key has at most one pending call. Scheduling again for the same key
    replaces the pending call, so only the latest arguments are written once
    ``delay`` seconds pass without further changes.
    """

    def __init__(self, delay: float = 0.5) -> None:
        self.delay = delay
        self._lock = threading.Lock()
        self._timers: Dict[str, threading.Timer] = {}
        self._calls: Dict[str, Tuple[Callable[..., Any], tuple]] = {}

    def schedule(self, key: str, fn: Callable[..., Any], *args: Any) -> None:
        with self._lock:
            previous = self._timers.pop(key, None)
            if previous is not None:
                previous.cancel()
                logger.debug("Replaced pending call for %s", key)
            timer = threading.Timer(self.delay, self._fire)
            timer.args = (key, timer)
            timer.daemon = True
            self._timers[key] = timer
            self._calls[key] = (fn, args)
        timer.start()

    def _take(self, key: str) -> Tuple[Callable[..., Any], tuple] | None:
        with self._lock:
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.cancel()
            return self._calls.pop(key, None)

    def _fire(self, key: str, timer: threading.Timer) -> None:
        with self._lock:
            # a replaced timer may already be waiting on the lock
            if self._timers.get(key) is not timer:
                return
            del self._timers[key]
            call = self._calls.pop(key, None)
        if call is None:
            return
        fn, args = call
        fn(*args)

    def pending(self) -> List[str]:
        with self._lock:
            return sorted(self._calls)

    def flush(self) -> int:
        """Run every pending call now; return how many ran."""
        ran = 0
        for key in self.pending():
            call = self._take(key)
            if call is None:
                continue
            fn, args = call
            fn(*args)
            ran += 1
        return ran

    def cancel_all(self) -> None:
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
            self._calls.clear()
