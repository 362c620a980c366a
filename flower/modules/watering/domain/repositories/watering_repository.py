# 📄 File: flower/modules/watering/domain/repositories/watering_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines what the app needs from the database for waterings: save a new one, and keep
# telling us about today's waterings and the latest one.
#
# 🧪 Purpose (Technical Summary):
# Repository interface for the append-only watering event log with live, cancellable
# subscriptions. Every delivered update is a full snapshot, never a delta.
#
# 🔗 Dependencies:
# Domain models (WateringEvent), Subscription handle, typing, abc
#
# 🔄 Connected Modules / Calls From:
# Watering log service, infrastructure implementation, test fakes

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, List, Optional

from flower.shared.core.subscriptions import Subscription

from ..models.watering_event import WateringEvent

TodayCallback = Callable[[List[WateringEvent]], Any]
MostRecentCallback = Callable[[Optional[WateringEvent]], Any]


class WateringRepository(ABC):
    """Repository interface for the waterings collection."""

    @abstractmethod
    async def insert(self, event: WateringEvent) -> WateringEvent:
        """
        Append an event; the store assigns the timestamp.

        Returns:
            The stored event carrying the server timestamp

        Raises:
            WriteFailure: If the insert fails
        """
        pass

    @abstractmethod
    async def subscribe_today(
        self,
        couple_id: str,
        start_of_day: datetime,
        callback: TodayCallback
    ) -> Subscription:
        """
        Live set of the couple's events with timestamp >= ``start_of_day``.

        The callback receives the initial snapshot and every later one.
        """
        pass

    @abstractmethod
    async def subscribe_most_recent(
        self,
        couple_id: str,
        callback: MostRecentCallback
    ) -> Subscription:
        """Live most recent event of the couple, or None when there is none."""
        pass
