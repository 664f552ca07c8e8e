"""
FormFlow Scheduling - Injectable Clocks and Timers
==================================================

Debounce is the only time-aware operator in formflow, and it never touches a
wall clock directly. Instead it asks a Scheduler to run an action after a
delay and keeps the returned ScheduledAction so the timer can be cancelled.

Two schedulers are provided:

- **VirtualTimeScheduler**: a fake clock that only moves when told to. Tests
  and the demo CLI use it to replay typing sessions deterministically.
- **AsyncioScheduler**: backs timers with ``loop.call_later`` so that
  debounced emissions happen on the event loop the UI runs on.

```python
from formflow.scheduling import VirtualTimeScheduler

scheduler = VirtualTimeScheduler()
fired = []
scheduler.schedule(0.8, lambda: fired.append(scheduler.now()))

scheduler.advance_by(0.5)   # nothing yet
scheduler.advance_by(0.5)   # fires at t=0.8
print(fired)                # [0.8]
```

Ordering
--------

Actions due at the same instant run in the order they were scheduled. An
action scheduled from inside another action runs during the same
``advance_to`` call when it falls due inside the advanced window.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple


class ScheduledAction:
    """Handle for a pending timer returned by ``Scheduler.schedule``."""

    __slots__ = ("due", "_action", "_cancelled", "_done", "_cancel_hook")

    def __init__(
        self,
        due: float,
        action: Callable[[], None],
        cancel_hook: Optional[Callable[[], None]] = None,
    ) -> None:
        self.due = due
        self._action = action
        self._cancelled = False
        self._done = False
        self._cancel_hook = cancel_hook

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    def bind_cancel(self, hook: Callable[[], None]) -> None:
        """Attach the scheduler-side cleanup run when this action is cancelled."""
        if self._cancelled or self._done:
            raise RuntimeError(f"cannot bind a cancel hook to a finished action: {self!r}")
        self._cancel_hook = hook

    def cancel(self) -> None:
        """Prevent the action from running. Safe to call more than once."""
        if self._cancelled or self._done:
            return
        self._cancelled = True
        self._action = None
        hook, self._cancel_hook = self._cancel_hook, None
        if hook is not None:
            hook()

    def run(self) -> None:
        if self._cancelled or self._done:
            return
        self._done = True
        action, self._action = self._action, None
        self._cancel_hook = None
        action()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "done" if self._done else "pending"
        return f"ScheduledAction(due={self.due!r}, {state})"


class Scheduler(ABC):
    """Clock plus one-shot timers."""

    @abstractmethod
    def now(self) -> float:
        """Current time in scheduler units."""

    @abstractmethod
    def schedule(self, delay: float, action: Callable[[], None]) -> ScheduledAction:
        """Run ``action`` once, ``delay`` units from now."""


class VirtualTimeScheduler(Scheduler):
    """
    Deterministic scheduler driven by explicit calls to advance time.

    Time starts at ``start`` (default 0.0) and moves forward only through
    ``advance_by``, ``advance_to`` or ``run_all``.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._queue: List[Tuple[float, int, ScheduledAction]] = []
        self._sequence = itertools.count()
        self._live = 0

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of timers that are neither cancelled nor run."""
        return self._live

    @property
    def queued(self) -> int:
        """Entries held in the timer queue, including cancelled ones not yet pruned."""
        return len(self._queue)

    def schedule(self, delay: float, action: Callable[[], None]) -> ScheduledAction:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay!r}")
        self._prune()
        item = ScheduledAction(self._now + delay, action)
        item.bind_cancel(self._forget)
        heapq.heappush(self._queue, (item.due, next(self._sequence), item))
        self._live += 1
        return item

    def _forget(self) -> None:
        self._live -= 1
        self._prune()

    def _prune(self) -> None:
        # Debounce restarts cancel the earliest timer, so dead entries collect at the head.
        queue = self._queue
        while queue and queue[0][2].cancelled:
            heapq.heappop(queue)

    def _run(self, item: ScheduledAction) -> None:
        self._live -= 1
        item.run()

    def advance_to(self, target: float) -> int:
        """Move the clock to ``target``, running every action due on the way.

        Returns the number of actions that ran.
        """
        if target < self._now:
            raise ValueError(
                f"cannot move virtual time backwards from {self._now!r} to {target!r}"
            )
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, item = heapq.heappop(self._queue)
            if item.cancelled:
                continue
            self._now = due
            self._run(item)
            ran += 1
        self._now = target
        return ran

    def advance_by(self, delta: float) -> int:
        if delta < 0:
            raise ValueError(f"delta must be >= 0, got {delta!r}")
        return self.advance_to(self._now + delta)

    def run_all(self) -> int:
        """Run every pending action, advancing the clock as far as needed."""
        ran = 0
        while self._queue:
            due, _, item = heapq.heappop(self._queue)
            if item.cancelled:
                continue
            self._now = max(self._now, due)
            self._run(item)
            ran += 1
        return ran


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop.

    When no loop is given, the running loop is looked up at call time, so the
    scheduler can be created outside a coroutine but must be used inside one.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def schedule(self, delay: float, action: Callable[[], None]) -> ScheduledAction:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay!r}")
        loop = self.loop
        item = ScheduledAction(loop.time() + delay, action)
        handle = loop.call_later(delay, item.run)
        item.bind_cancel(handle.cancel)
        return item
