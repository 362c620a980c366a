# 📄 File: flower/modules/watering/presentation/watering_screen.py
# 🧭 Purpose (Layman Explanation):
# The brains behind the rose screen: tap to water, see how often each of you watered today,
# who watered last, and whether the rose is wilted. Leaving the screen stops all live updates.
#
# 🧪 Purpose (Technical Summary):
# Async context manager owning the screen's resources: both live watering subscriptions and
# the periodic dryness tick. Entering acquires them; exiting releases them on every path,
# including errors raised while entering. Taps are applied optimistically and rolled back
# if the write fails.
#
# 🔗 Dependencies:
# asyncio, WateringLog, WateringViewState, DrynessModel, AppSession, AuthService
#
# 🔄 Connected Modules / Calls From:
# UI shell, application container (flower.main), tests

import asyncio
from datetime import timedelta
from typing import Optional

from flower.modules.accounts.application.session import AppSession
from flower.modules.accounts.domain.services.auth_service import AuthService
from flower.shared.core.exceptions import BackendError, BackendErrorCode, FlowerException
from flower.shared.core.subscriptions import CompositeSubscription, Subscription
from flower.shared.utils.helpers import Clock, start_of_local_day, utc_now
from flower.shared.utils.logging import get_logger

from ..application.projection import WateringViewState
from ..domain.models.dryness import DEFAULT_DRY_AFTER, DrynessModel, DrynessState
from ..domain.models.watering_event import WateringEvent
from ..domain.services.watering_log import WateringLog

logger = get_logger(__name__)

DEFAULT_TICK_INTERVAL = 60.0


class WateringScreen:
    """
    View-model of the watering screen.

    Usage::

        async with WateringScreen(log, auth, session) as screen:
            await screen.water()
            screen.my_today_count
    """

    def __init__(
        self,
        watering_log: WateringLog,
        auth_service: AuthService,
        session: AppSession,
        dry_after: timedelta = DEFAULT_DRY_AFTER,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        clock: Clock = utc_now
    ):
        self.watering_log = watering_log
        self.auth_service = auth_service
        self.session = session
        self.dry_after = dry_after
        self.tick_interval = tick_interval
        self.clock = clock

        self.state: Optional[WateringViewState] = None
        self.error: Optional[str] = None
        self._today_subscription: Optional[Subscription] = None
        self._recent_subscription: Optional[Subscription] = None
        self._tick_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Resource scope
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "WateringScreen":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        """Start both subscriptions and the dryness tick."""
        uid = self._require_uid()
        now = self.clock()
        self.state = WateringViewState(
            my_uid=uid,
            start_of_day=start_of_local_day(now),
            dryness=DrynessModel(self.dry_after)
        )
        try:
            self._today_subscription = await self._subscribe_today()
            self._recent_subscription = await self.watering_log.subscribe_most_recent(
                self.session.couple_id, self._on_most_recent
            )
            self._tick_task = asyncio.get_running_loop().create_task(self._tick_loop())
        except BaseException:
            await self.close()
            raise
        logger.info(f"Watering screen opened for {uid}", extra={"couple_id": self.session.couple_id})

    async def close(self) -> None:
        """Release everything acquired by ``open``; safe to call repeatedly."""
        task, self._tick_task = self._tick_task, None
        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        subscriptions = CompositeSubscription(
            s for s in (self._today_subscription, self._recent_subscription) if s is not None
        )
        self._today_subscription = None
        self._recent_subscription = None
        if len(subscriptions):
            await subscriptions.unsubscribe()
            logger.debug("Watering screen subscriptions released")

    @property
    def is_open(self) -> bool:
        return self._tick_task is not None

    # ------------------------------------------------------------------
    # Rendered values
    # ------------------------------------------------------------------

    @property
    def my_today_count(self) -> int:
        return self.state.my_today_count if self.state else 0

    @property
    def partner_today_count(self) -> int:
        return self.state.partner_today_count if self.state else 0

    @property
    def most_recent_event(self) -> Optional[WateringEvent]:
        return self.state.most_recent_event if self.state else None

    @property
    def dryness_state(self) -> DrynessState:
        return self.state.dryness_state if self.state else DrynessState.DRY

    @property
    def is_dry(self) -> bool:
        return self.dryness_state == DrynessState.DRY

    def display_name(self, uid: str) -> str:
        return self.session.names.display_name(uid)

    def last_watered_by(self) -> str:
        """Username of whoever watered last, "" while unknown."""
        event = self.most_recent_event
        return self.display_name(event.user_id) if event else ""

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def water(self) -> Optional[WateringEvent]:
        """
        Record one watering.

        The event shows immediately; a failed write removes it again.
        """
        uid = self._require_uid()
        couple_id = self.session.couple_id
        self.error = None
        event = self.watering_log.new_event(couple_id, uid, self.clock())
        if self.state is not None:
            self.state.apply_local_event(event, self.clock())

        try:
            stored = await self.watering_log.record_watering(couple_id, uid, event)
        except FlowerException as e:
            logger.error(f"Watering write failed for {uid}: {e.message}")
            if self.state is not None:
                self.state.discard_local_event(event.event_id, self.clock())
            self.error = e.message
            return None
        if self.state is not None:
            self.state.settle_local_event(stored, self.clock())
        return stored

    async def tick(self) -> DrynessState:
        """
        Re-evaluate dryness; moves to a new day at local midnight.

        A today feed that could not be attached is attached again here,
        after the dryness state has been updated.
        """
        now = self.clock()
        if self.state is None:
            return DrynessState.DRY
        previous: Optional[Subscription] = None
        start = start_of_local_day(now)
        if start != self.state.start_of_day:
            logger.info(f"Local day rolled over to {start.date()}")
            self.state.reset_day(start, now)
            previous, self._today_subscription = self._today_subscription, None

        state = self.state.tick(now)
        if previous is not None:
            await previous.unsubscribe()
        if self._today_subscription is None and self.is_open:
            self._today_subscription = await self._subscribe_today()
            logger.info("Today feed attached", extra={"start_of_day": self.state.start_of_day.isoformat()})
        return state

    async def sign_out(self) -> None:
        """Release the screen, then sign out."""
        await self.close()
        await self.auth_service.sign_out()
        self.session.signed_out()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _subscribe_today(self) -> Subscription:
        return await self.watering_log.subscribe_today(
            self.session.couple_id, self.state.start_of_day, self._on_today
        )

    def _on_today(self, events) -> None:
        if self.state is None:
            return
        self.state.apply_today_snapshot(events, self.clock())
        for user_id in {e.user_id for e in events}:
            self.session.names.request(user_id)

    def _on_most_recent(self, event: Optional[WateringEvent]) -> None:
        if self.state is None:
            return
        self.state.apply_most_recent(event, self.clock())
        if event is not None:
            self.session.names.request(event.user_id)

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            try:
                await self.tick()
            except FlowerException as e:
                logger.warning(f"Dryness tick failed: {e.message}")
            except Exception as e:
                # retried on the next tick
                logger.error(f"Dryness tick failed unexpectedly: {e}", exc_info=True)

    def _require_uid(self) -> str:
        uid = self.session.uid
        if uid is None:
            raise BackendError(message="Not signed in", code=BackendErrorCode.NOT_SIGNED_IN)
        return uid
