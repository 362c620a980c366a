# 📄 File: flower/shared/core/subscriptions.py
# 🧭 Purpose (Layman Explanation):
# Every live feed the app listens to (new waterings, sign-in changes) hands back a "ticket";
# handing the ticket back stops the feed so old screens don't keep listening forever.
# 🧪 Purpose (Technical Summary):
# Cancellable subscription handles with deterministic, idempotent release, and a composite
# handle that releases several subscriptions at once (on every exit path).
# 🔗 Dependencies:
# abc, asyncio, inspect, logging
# 🔄 Connected Modules / Calls From:
# Watering repository implementations, identity provider adapters, watering screen, app session

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

Release = Callable[[], Union[None, Awaitable[None]]]


class Subscription(ABC):
    """
    Handle returned by every live subscription.

    ``unsubscribe`` must be safe to call more than once; only the first
    call releases the underlying listener.
    """

    @property
    @abstractmethod
    def active(self) -> bool:
        """Whether the listener is still attached."""
        pass

    @abstractmethod
    async def unsubscribe(self) -> None:
        """Release the listener."""
        pass


class CallbackSubscription(Subscription):
    """Subscription released by calling a sync or async function once."""

    def __init__(self, release: Release, name: str = "subscription"):
        self._release: Optional[Release] = release
        self.name = name

    @property
    def active(self) -> bool:
        return self._release is not None

    async def unsubscribe(self) -> None:
        release, self._release = self._release, None
        if release is None:
            return
        result = release()
        if inspect.isawaitable(result):
            await result
        logger.debug(f"Released {self.name}")


class CompositeSubscription(Subscription):
    """
    Releases a group of subscriptions together.

    Every member is released even if an earlier one fails; the first
    failure is re-raised afterwards.
    """

    def __init__(self, subscriptions: Iterable[Subscription] = ()):
        self._subscriptions: List[Subscription] = list(subscriptions)
        self._released = False

    def add(self, subscription: Subscription) -> None:
        if self._released:
            raise RuntimeError("Cannot add to a released subscription group")
        self._subscriptions.append(subscription)

    @property
    def active(self) -> bool:
        return any(s.active for s in self._subscriptions)

    def __len__(self) -> int:
        return len(self._subscriptions)

    async def unsubscribe(self) -> None:
        self._released = True
        first_error: Optional[BaseException] = None
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            try:
                await subscription.unsubscribe()
            except Exception as e:
                logger.error(f"Failed to release subscription: {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error


async def invoke_callback(callback: Callable[..., Any], *args: Any) -> None:
    """Call a sync or async listener callback."""
    result = callback(*args)
    if inspect.isawaitable(result):
        await result
