"""
FormFlow Operators - Stream Transformers
========================================

Each operator is a Stream that wraps one (or, for combine_latest, several)
upstream streams. Subscribing to an operator subscribes to its upstream with
a handler holding that subscription's private state.

| Operator                   | State per subscription          | Timing       |
|----------------------------|---------------------------------|--------------|
| ``MapStream``              | none                            | synchronous  |
| ``DistinctUntilChanged``   | last forwarded value            | synchronous  |
| ``DropFirstStream``        | emissions seen so far           | synchronous  |
| ``CombineLatestStream``    | latest value per upstream       | synchronous  |
| ``DebounceStream``         | pending timer                   | scheduler    |

combine_latest
--------------

One combinator covers every arity. It stays silent until each upstream has
emitted once, then emits a tuple of the latest values whenever any upstream
emits. Emissions are not coalesced across upstreams and tuples are not
compared, so put ``distinct_until_changed`` after it if that matters.
"""

import operator
from typing import Any, Callable, List, Optional, TypeVar

from ..subscription import Subscription
from .stream import Observer, Stream

T = TypeVar("T")
R = TypeVar("R")

# Marks a combine slot or dedup memory that has not seen a value yet.
_NOTHING = object()


class MapStream(Stream[R]):
    """Forward ``func(value)`` for every upstream value."""

    def __init__(
        self, source: Stream[T], func: Callable[[T], R], key: Optional[str] = None
    ) -> None:
        super().__init__(key or f"map({source.key})")
        self._source = source
        self._func = func

    def _subscribe(self, observer: Observer) -> Subscription:
        func = self._func

        def on_next(value: T) -> None:
            observer(func(value))

        return self._source.subscribe(on_next)


class DistinctUntilChangedStream(Stream[T]):
    """Drop values equal to the last forwarded one."""

    def __init__(
        self,
        source: Stream[T],
        comparer: Optional[Callable[[Any, Any], bool]] = None,
    ) -> None:
        super().__init__(f"distinct({source.key})")
        self._source = source
        self._comparer = comparer or operator.eq

    def _subscribe(self, observer: Observer) -> Subscription:
        comparer = self._comparer
        last = _NOTHING

        def on_next(value: T) -> None:
            nonlocal last
            if last is not _NOTHING and comparer(last, value):
                return
            last = value
            observer(value)

        return self._source.subscribe(on_next)


class DropFirstStream(Stream[T]):
    """Discard the first ``count`` values, forward the rest."""

    def __init__(self, source: Stream[T], count: int = 1) -> None:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count!r}")
        super().__init__(f"drop_first({source.key}, {count})")
        self._source = source
        self._count = count

    def _subscribe(self, observer: Observer) -> Subscription:
        remaining = self._count

        def on_next(value: T) -> None:
            nonlocal remaining
            if remaining > 0:
                remaining -= 1
                return
            observer(value)

        return self._source.subscribe(on_next)


class CombineLatestStream(Stream[tuple]):
    """N-ary combine-latest over an ordered list of upstreams."""

    def __init__(self, *sources: Stream) -> None:
        if not sources:
            raise ValueError("At least one stream must be provided to combine_latest")
        super().__init__("combine_latest(" + ", ".join(s.key for s in sources) + ")")
        self._sources = sources

    @property
    def arity(self) -> int:
        return len(self._sources)

    def _subscribe(self, observer: Observer) -> Subscription:
        values: List[Any] = [_NOTHING] * len(self._sources)
        missing = len(self._sources)

        def create_handler(index: int) -> Callable[[Any], None]:
            def on_next(value: Any) -> None:
                nonlocal missing
                if values[index] is _NOTHING:
                    missing -= 1
                values[index] = value
                if missing == 0:
                    observer(tuple(values))

            return on_next

        upstreams: List[Subscription] = []
        try:
            for i, source in enumerate(self._sources):
                upstreams.append(source.subscribe(create_handler(i)))
        except Exception:
            for upstream in upstreams:
                upstream.dispose()
            raise

        def dispose() -> None:
            for upstream in upstreams:
                upstream.dispose()

        return Subscription(dispose)


class DebounceStream(Stream[T]):
    """
    Forward a value only after ``interval`` passes with no newer value.

    Every upstream value cancels the pending timer (if any) and schedules a
    new one carrying that value. The first value waits the full interval too.
    Disposing the subscription cancels the pending timer, dropping its value.
    """

    def __init__(self, source: Stream[T], interval: float, scheduler) -> None:
        if isinstance(interval, bool) or not isinstance(interval, (int, float)):
            raise ValueError(f"interval must be a number, got {type(interval).__name__}")
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval!r}")
        super().__init__(f"debounce({source.key}, {interval})")
        self._source = source
        self._interval = interval
        self._scheduler = scheduler

    @property
    def interval(self) -> float:
        return self._interval

    def _subscribe(self, observer: Observer) -> Subscription:
        scheduler = self._scheduler
        interval = self._interval
        pending = None

        def on_next(value: T) -> None:
            nonlocal pending
            if pending is not None:
                pending.cancel()

            def emit() -> None:
                nonlocal pending
                pending = None
                observer(value)

            pending = scheduler.schedule(interval, emit)

        upstream = self._source.subscribe(on_next)

        def dispose() -> None:
            nonlocal pending
            upstream.dispose()
            if pending is not None:
                pending.cancel()
                pending = None

        return Subscription(dispose)


def combine_latest(*sources: Stream) -> CombineLatestStream:
    """Combine the latest values of ``sources`` into tuples."""
    return CombineLatestStream(*sources)
