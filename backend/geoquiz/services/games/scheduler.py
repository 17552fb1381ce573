import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class TurnClock:
    """Cancellable per-second countdown for one turn.

    - Runs its countdown on a background task (`spawn`) and waits with `sleep`
    - Every tick and the final expiry are delivered while holding `lock`, the
      owning session's lock, so they queue behind player actions
    - `cancel()` bumps the generation; a tick waiting on the lock then sees a
      stale generation and is dropped
    - `on_expire` fires at most once
    """

    def __init__(self, spawn: Callable, sleep: Callable, lock=None,
                 tick_interval: float = 1.0, label: str = ''):
        self._spawn = spawn
        self._sleep = sleep
        self._lock = lock if lock is not None else threading.RLock()
        self.tick_interval = tick_interval
        self.label = label
        self._generation = 0
        self._running = False
        self.expired = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self, duration: int, on_tick: Callable[[int], None],
              on_expire: Callable[[], None]) -> None:
        if duration < 1:
            raise ValueError(f"Turn duration must be at least 1 second, got {duration}")
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._running = True
            self.expired = False
        logger.info(f"[timer-set] {self.label} duration={duration}s generation={generation}")
        self._spawn(self._worker, generation, duration, on_tick, on_expire)

    def cancel(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._generation += 1
        logger.debug(f"[timer-cancel] {self.label} generation={self._generation}")

    def _worker(self, generation: int, duration: int, on_tick, on_expire):
        remaining = duration
        while remaining > 0:
            self._sleep(self.tick_interval)
            with self._lock:
                if generation != self._generation:
                    logger.debug(f"[timer-abort] {self.label} stale generation={generation}")
                    return
                remaining -= 1
                on_tick(remaining)
                if remaining > 0:
                    continue
                # on_tick may have cancelled us
                if generation != self._generation:
                    return
                self._running = False
                self._generation += 1
                self.expired = True
                logger.info(f"[timer-fire] {self.label} expired after {duration}s")
                on_expire()


def make_clock_factory(socketio, tick_interval: float = 1.0):
    """Build TurnClocks backed by Flask-SocketIO background tasks."""
    def factory(lock, label=''):
        return TurnClock(socketio.start_background_task, socketio.sleep, lock,
                         tick_interval=tick_interval, label=label)
    return factory
