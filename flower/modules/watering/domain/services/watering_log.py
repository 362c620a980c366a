# 📄 File: flower/modules/watering/domain/services/watering_log.py
# 🧭 Purpose (Layman Explanation):
# The couple's watering diary: writes down every tap and lets the screen follow today's
# entries and the latest one as they happen.
#
# 🧪 Purpose (Technical Summary):
# Domain service over WateringRepository. One insert per call, no deduplication or rate
# limiting; subscriptions are passed through as cancellable handles.
#
# 🔗 Dependencies:
# WateringRepository, structured logging
#
# 🔄 Connected Modules / Calls From:
# Watering screen, application container

from datetime import datetime
from typing import Optional

from flower.shared.core.subscriptions import Subscription
from flower.shared.utils.helpers import utc_now
from flower.shared.utils.logging import get_logger

from ..models.watering_event import WateringEvent
from ..repositories.watering_repository import MostRecentCallback, TodayCallback, WateringRepository

logger = get_logger(__name__)


class WateringLog:
    """
    Append-only log of a couple's watering events.

    Business rules:
    - Every call records exactly one event, even rapid repeats
    - Timestamps are assigned by the store, not the device
    - Events are never edited or deleted
    """

    def __init__(self, watering_repository: WateringRepository):
        self.watering_repository = watering_repository

    def new_event(self, couple_id: str, uid: str, timestamp: Optional[datetime] = None) -> WateringEvent:
        """Pending event with a fresh id, timestamped by the local clock."""
        return WateringEvent(
            couple_id=couple_id,
            user_id=uid,
            timestamp=timestamp or utc_now(),
            pending=True
        )

    async def record_watering(
        self,
        couple_id: str,
        uid: str,
        event: Optional[WateringEvent] = None
    ) -> WateringEvent:
        """
        Record one watering by ``uid`` for ``couple_id``.

        Args:
            event: Optimistic copy already shown locally; its id is reused

        Raises:
            WriteFailure: If the store rejects the insert
        """
        pending = event or self.new_event(couple_id, uid)
        stored = await self.watering_repository.insert(pending)
        logger.log_business_event(
            event_type="watering_recorded",
            description=f"User {uid} watered the plant of {couple_id}",
            entity_id=stored.event_id,
            entity_type="watering",
            extra={"couple_id": couple_id, "user_id": uid}
        )
        return stored

    async def subscribe_today(
        self,
        couple_id: str,
        start_of_day: datetime,
        callback: TodayCallback
    ) -> Subscription:
        return await self.watering_repository.subscribe_today(couple_id, start_of_day, callback)

    async def subscribe_most_recent(self, couple_id: str, callback: MostRecentCallback) -> Subscription:
        return await self.watering_repository.subscribe_most_recent(couple_id, callback)
