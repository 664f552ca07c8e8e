"""
FormFlow Stream - Cold Push-Based Sequences
===========================================

A Stream is a description of values that will be pushed to an observer. It
does nothing until subscribed. Each ``subscribe`` call builds a fresh chain of
operator state for that observer, so two subscribers of the same debounced
stream get two independent timers.

Operators are available as chainable methods:

```python
from formflow.observable import SourceCell
from formflow.scheduling import VirtualTimeScheduler

scheduler = VirtualTimeScheduler()
email = SourceCell("email", "")

email_valid = (
    email.debounce(0.8, scheduler)
    .distinct_until_changed()
    .map(lambda v: len(v) >= 3)
)

subscription = email_valid.subscribe(print)
email.set("abc")
scheduler.advance_by(1.0)   # prints True
subscription.dispose()
```

Delivery Guarantees
-------------------

- Values are delivered synchronously, depth-first, on the thread that
  produced them (a cell write or a scheduler callback).
- Once a subscription is disposed its observer is never called again, even
  if an upstream broadcast that started before the dispose is still running.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

from ..subscription import Subscription

if TYPE_CHECKING:
    from ..scheduling import Scheduler

T = TypeVar("T")
R = TypeVar("R")

Observer = Callable[[T], None]


class _GatedObserver(Generic[T]):
    """Forwards values to an observer until closed."""

    __slots__ = ("_observer", "_closed")

    def __init__(self, observer: Observer) -> None:
        self._observer = observer
        self._closed = False

    def close(self) -> None:
        self._closed = True
        self._observer = None

    def __call__(self, value: T) -> None:
        if not self._closed:
            self._observer(value)


class Stream(ABC, Generic[T]):
    """Base class for every subscribable sequence in formflow."""

    def __init__(self, key: Optional[str] = None) -> None:
        self._key = key or "<unnamed>"

    @property
    def key(self) -> str:
        return self._key

    def subscribe(self, observer: Observer) -> Subscription:
        """Attach ``observer`` and return the handle that detaches it."""
        if not callable(observer):
            raise TypeError(f"observer must be callable, got {type(observer).__name__}")
        gate = _GatedObserver(observer)
        try:
            upstream = self._subscribe(gate)
        except Exception:
            gate.close()
            raise

        def dispose() -> None:
            gate.close()
            upstream.dispose()

        return Subscription(dispose)

    @abstractmethod
    def _subscribe(self, observer: Observer) -> Subscription:
        """Wire ``observer`` to this stream's source(s)."""

    # Operators. Imported lazily: operators.py subclasses Stream.

    def map(self, func: Callable[[T], R]) -> "Stream[R]":
        from .operators import MapStream

        return MapStream(self, func)

    def starmap(self, func: Callable[..., R]) -> "Stream[R]":
        """Like ``map`` but unpacks tuple values into positional arguments."""
        from .operators import MapStream

        return MapStream(self, lambda values: func(*values), key=f"starmap({self._key})")

    def debounce(self, interval: float, scheduler: "Scheduler") -> "Stream[T]":
        from .operators import DebounceStream

        return DebounceStream(self, interval, scheduler)

    def distinct_until_changed(
        self, comparer: Optional[Callable[[Any, Any], bool]] = None
    ) -> "Stream[T]":
        from .operators import DistinctUntilChangedStream

        return DistinctUntilChangedStream(self, comparer)

    def drop_first(self, count: int = 1) -> "Stream[T]":
        from .operators import DropFirstStream

        return DropFirstStream(self, count)

    def combine_latest(self, *others: "Stream") -> "Stream[tuple]":
        from .operators import CombineLatestStream

        return CombineLatestStream(self, *others)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._key!r})"
