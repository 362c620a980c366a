# 📄 File: flower/modules/watering/domain/models/watering_event.py
# 🧭 Purpose (Layman Explanation):
# One "I watered the rose" tap: who did it, for which couple, and when.
#
# 🧪 Purpose (Technical Summary):
# Immutable watering event. Ids are generated on the client so an optimistic local copy and
# the confirmed stored copy share one identity; the timestamp of a pending event is the local
# clock until the server's own timestamp arrives.
#
# 🔗 Dependencies:
# pydantic, datetime
#
# 🔄 Connected Modules / Calls From:
# Watering log, watering repository, view-state projection, watering screen

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from flower.shared.utils.helpers import generate_id


class WateringEvent(BaseModel):
    """
    A single watering event of a couple.

    Events are append-only and never updated. ``pending`` marks an
    optimistic copy not yet confirmed by the store.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=generate_id)
    couple_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    timestamp: datetime
    pending: bool = False

    def to_row(self) -> Dict[str, Any]:
        """Insert row; the timestamp is assigned by the server."""
        return {"id": self.event_id, "couple_id": self.couple_id, "user_id": self.user_id}

    def confirmed(self, timestamp: datetime) -> "WateringEvent":
        return self.model_copy(update={"timestamp": timestamp, "pending": False})
