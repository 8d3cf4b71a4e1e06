"""
Cancellable countdown for the player's turn.

A TurnTimer ticks once per interval on a daemon threading.Timer and calls
on_expire when the countdown reaches zero. Every timer is bound to a
CancellationToken; once the token is cancelled no further tick or expiry
callback runs, even if a tick was already scheduled.
"""

import threading
from typing import Callable, Optional


class CancellationToken:
    """One-shot cancellation flag shared between a timer and its owner."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class TurnTimer:
    """Countdown of `duration` ticks that fires on_expire unless cancelled."""

    def __init__(self, duration: int, on_expire: Callable[[], None],
                 token: Optional[CancellationToken] = None,
                 tick_interval: float = 1.0,
                 on_tick: Optional[Callable[[int], None]] = None):
        if duration <= 0:
            raise ValueError(f"Timer duration must be positive, got {duration}")
        self.duration = duration
        self.token = token or CancellationToken()
        self._on_expire = on_expire
        self._on_tick = on_tick
        self._tick_interval = tick_interval
        self._time_left = duration
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def time_left(self) -> int:
        return self._time_left

    @property
    def expired(self) -> bool:
        return self._time_left <= 0

    def start(self) -> None:
        with self._lock:
            if self.token.cancelled:
                return
            self._schedule()

    def cancel(self) -> None:
        self.token.cancel()
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None

    def _schedule(self) -> None:
        self._timer = threading.Timer(self._tick_interval, self._tick)
        self._timer.daemon = True
        self._timer.start()

    def _tick(self) -> None:
        with self._lock:
            if self.token.cancelled:
                return
            self._time_left -= 1
            time_left = self._time_left
            if time_left > 0:
                self._schedule()
            else:
                self._timer = None

        if self._on_tick:
            self._on_tick(time_left)
        if time_left <= 0 and not self.token.cancelled:
            self._on_expire()
