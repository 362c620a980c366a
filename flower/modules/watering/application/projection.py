# 📄 File: flower/modules/watering/application/projection.py
# 🧭 Purpose (Layman Explanation):
# Keeps the numbers on the watering screen right: how often I watered today, how often my
# partner did, who watered last and whether the rose is wilted. A tap shows up instantly and
# is not counted twice when the database confirms it.
#
# 🧪 Purpose (Technical Summary):
# Read-model projection fed by the two live subscriptions and local optimistic events.
# Counts are always recomputed from the union of the confirmed today-set and pending events,
# keyed by event id, so confirmation replaces an optimistic event instead of adding to it.
#
# 🔗 Dependencies:
# WateringEvent, DrynessModel, logging
#
# 🔄 Connected Modules / Calls From:
# Watering screen, tests

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..domain.models.dryness import DrynessModel, DrynessState
from ..domain.models.watering_event import WateringEvent

logger = logging.getLogger(__name__)

ChangeListener = Callable[["WateringViewState"], Any]


class WateringViewState:
    """
    Projection behind the watering screen.

    State:
    - ``confirmed``: last today-snapshot from the store, by event id
    - ``pending``: optimistic events not yet seen in a today-snapshot
    - ``confirmed_recent``: last most-recent event from the store

    ``most_recent_event`` is the newest of ``confirmed_recent`` and the
    today events; the dryness model always follows it.
    """

    def __init__(
        self,
        my_uid: str,
        start_of_day: datetime,
        dryness: Optional[DrynessModel] = None,
        listener: Optional[ChangeListener] = None
    ):
        self.my_uid = my_uid
        self.start_of_day = start_of_day
        self.dryness = dryness or DrynessModel()
        self.listener = listener

        self._confirmed: Dict[str, WateringEvent] = {}
        self._pending: Dict[str, WateringEvent] = {}
        self._confirmed_recent: Optional[WateringEvent] = None
        self.has_loaded_recent = False

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def today_events(self) -> List[WateringEvent]:
        """Confirmed and pending events of today, one per id."""
        merged = dict(self._pending)
        merged.update(self._confirmed)
        today = (e for e in merged.values() if e.timestamp >= self.start_of_day)
        return sorted(today, key=lambda e: e.timestamp)

    @property
    def my_today_count(self) -> int:
        return sum(1 for e in self.today_events() if e.user_id == self.my_uid)

    @property
    def partner_today_count(self) -> int:
        return sum(1 for e in self.today_events() if e.user_id != self.my_uid)

    @property
    def most_recent_event(self) -> Optional[WateringEvent]:
        # today's events cover the gap until the most-recent feed catches up
        candidates = {e.event_id: e for e in self.today_events()}
        if self._confirmed_recent is not None:
            candidates[self._confirmed_recent.event_id] = self._confirmed_recent
        if not candidates:
            return None
        return max(candidates.values(), key=lambda e: e.timestamp)

    @property
    def dryness_state(self) -> DrynessState:
        return self.dryness.state

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def apply_local_event(self, event: WateringEvent, now: datetime) -> None:
        """Show a just-recorded event before the store confirms it."""
        if event.event_id not in self._confirmed:
            self._pending[event.event_id] = event
        self._recompute_dryness(now)
        self._notify()

    def apply_today_snapshot(self, events: Iterable[WateringEvent], now: datetime) -> None:
        """Replace the confirmed today-set with a full store snapshot."""
        self._confirmed = {
            e.event_id: e for e in events if e.timestamp >= self.start_of_day
        }
        confirmed_ids = [i for i in self._pending if i in self._confirmed]
        for event_id in confirmed_ids:
            del self._pending[event_id]
        if confirmed_ids:
            logger.debug(f"Confirmed {len(confirmed_ids)} pending watering event(s)")
        self._recompute_dryness(now)
        self._notify()

    def apply_most_recent(self, event: Optional[WateringEvent], now: datetime) -> None:
        """Replace the confirmed most recent event (None when the log is empty)."""
        self._confirmed_recent = event
        self.has_loaded_recent = True
        if event is not None:
            self._settle(event)
        self._recompute_dryness(now)
        self._notify()

    def settle_local_event(self, stored: WateringEvent, now: datetime) -> None:
        """
        Replace a still-pending optimistic event with the stored copy.

        The stored timestamp comes from the server; a copy that lands
        before the start of the day is dropped.
        """
        if self._settle(stored):
            self._recompute_dryness(now)
            self._notify()

    def discard_local_event(self, event_id: str, now: datetime) -> None:
        """Roll back an optimistic event whose write failed."""
        if self._pending.pop(event_id, None) is None:
            return
        logger.info(f"Rolled back unconfirmed watering event {event_id}")
        self._recompute_dryness(now)
        self._notify()

    def tick(self, now: datetime) -> DrynessState:
        """Periodic dryness re-evaluation."""
        before = self.dryness.state
        state = self.dryness.tick(now)
        if state != before:
            self._notify()
        return state

    def reset_day(self, start_of_day: datetime, now: datetime) -> None:
        """Move to a new local day and drop events from the previous one."""
        self.start_of_day = start_of_day
        self._confirmed = {i: e for i, e in self._confirmed.items() if e.timestamp >= start_of_day}
        self._pending = {i: e for i, e in self._pending.items() if e.timestamp >= start_of_day}
        self._recompute_dryness(now)
        self._notify()

    def _settle(self, stored: WateringEvent) -> bool:
        if stored.event_id not in self._pending:
            return False
        if stored.timestamp < self.start_of_day:
            del self._pending[stored.event_id]
        else:
            self._pending[stored.event_id] = stored
        return True

    def _recompute_dryness(self, now: datetime) -> None:
        latest = self.most_recent_event
        self.dryness.observe(latest.timestamp if latest else None, now)

    def _notify(self) -> None:
        if self.listener:
            self.listener(self)
