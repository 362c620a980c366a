# 📄 File: flower/modules/watering/infrastructure/database/watering_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves each watering tap in the hosted database and listens for new taps from either partner,
# so both phones update live.
#
# 🧪 Purpose (Technical Summary):
# Supabase implementation of WateringRepository. Inserts go through PostgREST; live queries
# attach a Realtime postgres_changes channel filtered by couple and re-run the PostgREST query
# on every change, so each callback receives a full store-consistent snapshot.
#
# 🔗 Dependencies:
# - supabase AsyncClient (tables + realtime channels), postgrest APIError
# - flower.shared.infrastructure.supabase_repository
# - flower.shared.core.subscriptions
#
# 🔄 Connected Modules / Calls From:
# - Application container (flower.main)
# - WateringLog through the repository interface

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from postgrest.exceptions import APIError
from supabase import AsyncClient

from flower.shared.core.subscriptions import CallbackSubscription, Subscription, invoke_callback
from flower.shared.infrastructure.supabase_repository import SupabaseRepository, backend_error_from
from flower.shared.utils.helpers import generate_id, parse_timestamp

from ...domain.models.watering_event import WateringEvent
from ...domain.repositories.watering_repository import MostRecentCallback, TodayCallback, WateringRepository

logger = logging.getLogger(__name__)


class LiveQuery:
    """
    A query re-run on every change notification of a realtime channel.

    Refreshes are serialized so snapshots are delivered in query order;
    notifications arriving during a refresh collapse into one more run.
    """

    def __init__(self, name: str, query: Callable[[], Awaitable[Any]], callback: Callable[[Any], Any]):
        self.name = name
        self._query = query
        self._callback = callback
        self._lock = asyncio.Lock()
        self._tasks: Set[asyncio.Task] = set()
        self._queued = False
        self._closed = False

    async def refresh(self) -> None:
        if self._closed:
            return
        async with self._lock:
            self._queued = False
            snapshot = await self._query()
            if not self._closed:
                await invoke_callback(self._callback, snapshot)

    def notify(self, payload: Any = None) -> None:
        """Realtime callback; schedules a refresh on the running loop."""
        if self._closed or self._queued:
            return
        self._queued = True
        task = asyncio.get_running_loop().create_task(self._safe_refresh())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _safe_refresh(self) -> None:
        try:
            await self.refresh()
        except Exception as e:
            # the next notification retries; the subscription stays attached
            logger.error(f"Live query {self.name} refresh failed: {e}")

    async def close(self) -> None:
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


class WateringRepositoryImpl(SupabaseRepository, WateringRepository):
    """Supabase implementation of the WateringRepository interface."""

    def __init__(self, client: AsyncClient, table_name: str = "waterings", schema: str = "public"):
        super().__init__(client, table_name)
        self.schema = schema

    async def insert(self, event: WateringEvent) -> WateringEvent:
        row = await self._insert(event.to_row(), key=event.event_id)
        timestamp = parse_timestamp(row.get("timestamp")) or event.timestamp
        logger.debug(f"Inserted watering event {event.event_id} for {event.couple_id}")
        return event.confirmed(timestamp)

    async def fetch_today(self, couple_id: str, start_of_day: datetime) -> List[WateringEvent]:
        try:
            response = await (
                self._table()
                .select("*")
                .eq("couple_id", couple_id)
                .gte("timestamp", start_of_day.isoformat())
                .order("timestamp")
                .execute()
            )
        except APIError as e:
            raise backend_error_from(e) from e
        return [self._row_to_domain(row) for row in response.data or []]

    async def fetch_most_recent(self, couple_id: str) -> Optional[WateringEvent]:
        try:
            response = await (
                self._table()
                .select("*")
                .eq("couple_id", couple_id)
                .order("timestamp", desc=True)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise backend_error_from(e) from e
        rows = response.data or []
        return self._row_to_domain(rows[0]) if rows else None

    async def subscribe_today(
        self,
        couple_id: str,
        start_of_day: datetime,
        callback: TodayCallback
    ) -> Subscription:
        live = LiveQuery(
            name=f"today:{couple_id}",
            query=lambda: self.fetch_today(couple_id, start_of_day),
            callback=callback
        )
        return await self._attach(couple_id, live)

    async def subscribe_most_recent(self, couple_id: str, callback: MostRecentCallback) -> Subscription:
        live = LiveQuery(
            name=f"most-recent:{couple_id}",
            query=lambda: self.fetch_most_recent(couple_id),
            callback=callback
        )
        return await self._attach(couple_id, live)

    async def _attach(self, couple_id: str, live: LiveQuery) -> Subscription:
        """
        Subscribe a channel to inserts of the couple and deliver the first snapshot.

        The channel is joined before the initial query so no insert is missed.
        """
        channel = self._client.channel(f"{self.table_name}:{live.name}:{generate_id()}")
        channel.on_postgres_changes(
            "INSERT",
            schema=self.schema,
            table=self.table_name,
            filter=f"couple_id=eq.{couple_id}",
            callback=live.notify
        )
        await channel.subscribe()

        async def release() -> None:
            await live.close()
            await self._client.remove_channel(channel)

        subscription = CallbackSubscription(release, name=f"watering feed {live.name}")
        try:
            await live.refresh()
        except Exception:
            await subscription.unsubscribe()
            raise
        logger.info(f"Subscribed to watering feed {live.name}")
        return subscription

    @staticmethod
    def _row_to_domain(row: Dict[str, Any]) -> WateringEvent:
        return WateringEvent(
            event_id=str(row["id"]),
            couple_id=row["couple_id"],
            user_id=row["user_id"],
            timestamp=parse_timestamp(row["timestamp"]),
        )
