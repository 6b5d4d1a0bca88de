"""Named, independently cancellable timers built on threading.Timer.

Each name holds at most one live timer. Re-arming a name bumps its
generation so a callback already in flight never re-schedules the old task.
"""

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class Scheduler:
    def __init__(self):
        self.lock = threading.Lock()
        self.timers: dict[str, threading.Timer] = {}
        self._generation: dict[str, int] = {}
        self.running = True

    def every(self, name: str, interval: float, fn: Callable[[], None], run_now: bool = False) -> None:
        """Run `fn` every `interval` seconds, replacing any task named `name`."""
        with self.lock:
            gen = self._bump(name)
            if self.running:
                self._arm(name, 0.0 if run_now else interval, interval, fn, gen)

    def later(self, name: str, delay: float, fn: Callable[[], None]) -> None:
        """Run `fn` once after `delay` seconds, replacing any task named `name`."""
        with self.lock:
            gen = self._bump(name)
            if self.running:
                self._arm(name, delay, None, fn, gen)

    def cancel(self, name: str) -> None:
        with self.lock:
            self._bump(name)

    def cancel_all(self) -> None:
        """Cancel every timer and refuse new ones. Used on teardown."""
        with self.lock:
            self.running = False
            for name in list(self.timers):
                self._bump(name)

    def active(self) -> list[str]:
        with self.lock:
            return sorted(self.timers)

    # -- internals (lock held) -----------------------------------------------

    def _bump(self, name: str) -> int:
        gen = self._generation.get(name, 0) + 1
        self._generation[name] = gen
        timer = self.timers.pop(name, None)
        if timer:
            timer.cancel()
        return gen

    def _arm(self, name, delay, interval, fn, gen):
        timer = threading.Timer(delay, self._fire, args=(name, interval, fn, gen))
        timer.daemon = True
        self.timers[name] = timer
        timer.start()

    def _current(self, name: str, gen: int) -> bool:
        return self.running and self._generation.get(name) == gen

    def _fire(self, name, interval, fn, gen):
        with self.lock:
            if not self._current(name, gen):
                return
        try:
            fn()
        except Exception:
            logger.exception("Scheduled task %r failed", name)

        with self.lock:
            if not self._current(name, gen):
                return
            if interval is None:
                self.timers.pop(name, None)
            else:
                self._arm(name, interval, interval, fn, gen)
