# 📄 File: flower/modules/watering/domain/models/dryness.py
# 🧭 Purpose (Layman Explanation):
# Decides whether the rose looks fresh or wilted: if nobody watered it for more than three
# hours (or ever), it is dry.
#
# 🧪 Purpose (Technical Summary):
# Two-state machine (FRESH / DRY) over the most recent watering timestamp. Pure: the caller
# supplies "now", so it is driven identically by the periodic tick, optimistic events and
# confirmed events.
#
# 🔗 Dependencies:
# datetime, enum
#
# 🔄 Connected Modules / Calls From:
# View-state projection, watering screen, tests

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

DEFAULT_DRY_AFTER = timedelta(hours=3)


class DrynessState(str, Enum):
    FRESH = "fresh"
    DRY = "dry"


class DrynessModel:
    """
    Dryness of the shared plant.

    ``is_dry = (now - last_watering_at) > threshold``, or True when no
    watering is known. Exactly at the threshold the plant is still fresh.
    """

    def __init__(self, threshold: timedelta = DEFAULT_DRY_AFTER):
        if threshold <= timedelta(0):
            raise ValueError("Dryness threshold must be positive")
        self.threshold = threshold
        self.last_watering_at: Optional[datetime] = None
        self.state = DrynessState.DRY

    def is_dry(self, now: datetime) -> bool:
        if self.last_watering_at is None:
            return True
        return now - self.last_watering_at > self.threshold

    def observe(self, timestamp: Optional[datetime], now: datetime) -> DrynessState:
        """
        Record the latest watering time and recompute the state.

        Passing None forgets the last watering (no event exists).
        """
        self.last_watering_at = timestamp
        return self._recompute(now)

    def tick(self, now: datetime) -> DrynessState:
        """Periodic re-evaluation; only ever moves FRESH to DRY."""
        return self._recompute(now)

    def _recompute(self, now: datetime) -> DrynessState:
        self.state = DrynessState.DRY if self.is_dry(now) else DrynessState.FRESH
        return self.state

    def __repr__(self) -> str:
        return f"<DrynessModel(state={self.state.value}, last_watering_at={self.last_watering_at})>"
