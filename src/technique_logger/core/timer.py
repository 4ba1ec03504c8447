"""
Cooperative countdown timer.

The timer never owns a thread. It asks a Scheduler for one repeating
callback while it is running and cancels that callback whenever it stops,
so a paused, finished or disposed timer has nothing scheduled.

Two schedulers are provided:
- ManualScheduler: time advances only when the host calls advance(); used
  by tests and by the CLI, which drives it from its own loop.
- AsyncioScheduler: chains loop.call_later() on a running event loop.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Callable, Protocol, Sequence

from .config import TICK_INTERVAL_SECONDS, VIBRATION_DEFAULT
from .haptics import Haptics, pulse


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Invoke *callback* every *interval* seconds until the handle is cancelled."""


# ---------------------------------------------------------------------------
# Schedulers
# ---------------------------------------------------------------------------


class _ManualHandle:
    def __init__(self, interval: float, callback: Callable[[], None], due: float, seq: int):
        self.interval = interval
        self.callback = callback
        self.due = due
        self.seq = seq
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by advance().

    Callbacks fire in due-time order; a callback may cancel its own handle
    or schedule new ones while advance() is running.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._handles: list[_ManualHandle] = []
        self._seq = itertools.count()

    def call_every(self, interval: float, callback: Callable[[], None]) -> _ManualHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = _ManualHandle(interval, callback, self.now + interval, next(self._seq))
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> int:
        """Number of live (uncancelled) repeating callbacks."""
        return sum(1 for h in self._handles if not h.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that falls due."""
        target = self.now + seconds
        while True:
            self._handles = [h for h in self._handles if not h.cancelled]
            due = [h for h in self._handles if h.due <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.seq))
            self.now = handle.due
            handle.due += handle.interval
            handle.callback()
        self.now = target


class _AsyncioHandle:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._timer: asyncio.TimerHandle | None = loop.call_later(interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        # Re-arm first so the callback can cancel the next firing.
        self._timer = self._loop.call_later(self._interval, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop (the running loop by default)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_every(self, interval: float, callback: Callable[[], None]) -> _AsyncioHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioHandle(loop, interval, callback)


# ---------------------------------------------------------------------------
# Countdown timer
# ---------------------------------------------------------------------------


class CountdownTimer:
    """
    Single countdown with pause/resume/reset/skip.

    States:
    - idle: never started, finished, or cancelled (nothing scheduled)
    - running: active and ticking, one decrement per tick
    - paused: active, counter frozen, nothing scheduled

    Reaching zero while active stops ticking, fires a best-effort vibration
    and then calls on_zero(). skip() does the same synchronously.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_zero: Callable[[], None] | None = None,
        on_tick: Callable[[int], None] | None = None,
        haptics: Haptics | None = None,
        vibration: Sequence[int] = VIBRATION_DEFAULT,
        tick_interval: float = TICK_INTERVAL_SECONDS,
    ):
        self._scheduler = scheduler
        self._on_zero = on_zero
        self._on_tick = on_tick
        self._haptics = haptics
        self._vibration = tuple(vibration)
        self._tick_interval = tick_interval
        self._handle: TimerHandle | None = None
        self._duration = 0
        self._remaining = 0
        self._active = False
        self._paused = False
        self._disposed = False

    # -- state --------------------------------------------------------------

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def is_active(self) -> bool:
        """Started and not yet at zero (running or paused)."""
        return self._active

    @property
    def is_running(self) -> bool:
        return self._active and not self._paused

    @property
    def is_paused(self) -> bool:
        return self._active and self._paused

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    # -- operations ---------------------------------------------------------

    def start(self, seconds: int) -> None:
        """Reset the counter to *seconds* and begin ticking."""
        if self._disposed:
            return
        self._release()
        self._duration = self._remaining = max(0, int(seconds))
        self._active = True
        self._paused = False
        if self._remaining == 0:
            self._reach_zero()
            return
        self._schedule()

    def pause(self) -> None:
        if not self.is_running:
            return
        self._release()
        self._paused = True

    def resume(self) -> None:
        if not self.is_paused or self._disposed:
            return
        self._paused = False
        self._schedule()

    def reset(self) -> None:
        """Restore the configured duration and stop ticking (resume() restarts)."""
        self._release()
        self._remaining = self._duration
        if self._active:
            self._paused = True

    def skip(self) -> None:
        """Jump to zero and fire the zero-reached side effects now."""
        if not self._active:
            return
        self._release()
        self._remaining = 0
        self._reach_zero()

    def cancel(self) -> None:
        """Stop without firing on_zero; the timer can be started again."""
        self._release()
        self._active = False
        self._paused = False

    def dispose(self) -> None:
        """Cancel and refuse any further start()."""
        self.cancel()
        self._disposed = True

    # -- internals ----------------------------------------------------------

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_every(self._tick_interval, self._tick)

    def _release(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        if not self.is_running:
            return
        self._remaining -= 1
        if self._on_tick is not None:
            self._on_tick(self._remaining)
        if self._remaining <= 0:
            self._remaining = 0
            self._release()
            self._reach_zero()

    def _reach_zero(self) -> None:
        self._active = False
        self._paused = False
        pulse(self._haptics, self._vibration)
        if self._on_zero is not None:
            self._on_zero()
