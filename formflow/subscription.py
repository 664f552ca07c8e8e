"""
FormFlow Subscriptions
======================

Every ``Stream.subscribe`` call returns a Subscription handle. Disposing it
detaches the observer from its upstream and cancels whatever the operator
chain still has pending (debounce timers in particular).

The SubscriptionRegistry collects the handles created while a pipeline is
wired so that the whole graph can be torn down in one call:

```python
registry = SubscriptionRegistry()
registry.add(cell.subscribe(print))
registry.add(other.subscribe(print))

registry.dispose()   # both subscriptions disposed, exactly once
registry.dispose()   # no-op
```
"""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class Subscription:
    """Handle that detaches one observer. ``dispose`` runs its action at most once."""

    __slots__ = ("_dispose_action", "_disposed")

    def __init__(self, dispose_action: Optional[Callable[[], None]] = None) -> None:
        self._dispose_action = dispose_action
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        action, self._dispose_action = self._dispose_action, None
        if action is not None:
            action()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False

    def __repr__(self) -> str:
        return f"Subscription(disposed={self._disposed})"


class SubscriptionRegistry:
    """Owns a set of subscriptions and tears them down together."""

    def __init__(self, name: str = "registry") -> None:
        self.name = name
        self._subscriptions: List[Subscription] = []
        self._disposed = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def __len__(self) -> int:
        return len(self._subscriptions)

    def add(self, subscription: Subscription) -> Subscription:
        """Track ``subscription``. A disposed registry disposes it straight away."""
        if self._disposed:
            subscription.dispose()
            return subscription
        self._subscriptions.append(subscription)
        return subscription

    def dispose(self) -> None:
        """Dispose every tracked subscription, newest first."""
        if self._disposed:
            return
        self._disposed = True
        subscriptions, self._subscriptions = self._subscriptions, []
        logger.debug("Disposing %d subscription(s) in %s", len(subscriptions), self.name)
        for subscription in reversed(subscriptions):
            subscription.dispose()
