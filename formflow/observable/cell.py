"""
FormFlow Cells - Mutable Registers That Broadcast Writes
========================================================

SourceCell
    An input register written by the external collaborator (a text field
    binding, a test, the demo CLI). New subscribers immediately receive the
    current value, then every later write in write order.

OutputRegister
    An output register written only by the pipeline's output sink. Listeners
    are notified on writes but receive nothing on subscribe, so a UI that
    attaches early is not handed a default before the pipeline has derived
    anything.

Both broadcast every write, including a write equal to the current value;
deduplication is the job of ``distinct_until_changed`` downstream.
"""

import threading
from typing import Generic, List, Optional, TypeVar

from ..subscription import Subscription
from .stream import Observer, Stream

T = TypeVar("T")


class _Cell(Stream[T], Generic[T]):
    """Value plus ordered observer list."""

    _replay_on_subscribe = False

    def __init__(self, key: Optional[str] = None, initial_value: Optional[T] = None) -> None:
        super().__init__(key)
        self._value = initial_value
        self._observers: List[Observer] = []
        self._lock = threading.RLock()

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def _write(self, value: T) -> None:
        with self._lock:
            self._value = value
            observers_snapshot = tuple(self._observers)
        for observer in observers_snapshot:
            observer(value)

    def _subscribe(self, observer: Observer) -> Subscription:
        with self._lock:
            self._observers.append(observer)
            current = self._value

        def remove() -> None:
            with self._lock:
                try:
                    self._observers.remove(observer)
                except ValueError:
                    pass

        subscription = Subscription(remove)
        if self._replay_on_subscribe:
            try:
                observer(current)
            except Exception:
                subscription.dispose()
                raise
        return subscription

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._key!r}, {self._value!r})"


class SourceCell(_Cell[T]):
    """Input register with replay-of-latest semantics."""

    _replay_on_subscribe = True

    def set(self, value: T) -> "SourceCell[T]":
        """Store ``value`` and push it to every subscriber, in subscription order."""
        self._write(value)
        return self


class OutputRegister(_Cell[T]):
    """Output register. Only the owning sink writes to it.

    ``assign`` stores and notifies in one step. A sink keeping several
    registers consistent calls ``stage`` on each, then ``publish`` on each,
    so no listener sees one register updated and another still stale.
    """

    def assign(self, value: T) -> None:
        self._write(value)

    def stage(self, value: T) -> None:
        """Store ``value`` without notifying listeners."""
        with self._lock:
            self._value = value

    def publish(self) -> None:
        """Notify listeners of the current value."""
        with self._lock:
            value = self._value
            observers_snapshot = tuple(self._observers)
        for observer in observers_snapshot:
            observer(value)
