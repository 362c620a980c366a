# 📄 File: flower/shared/utils/helpers.py

# 🧭 Purpose (Layman Explanation):
# Small time and id helpers: "what time is it", "when did today start here", and fresh ids
# for new watering records.

# 🧪 Purpose (Technical Summary):
# Timezone-aware clock helpers (UTC now, local start of day, ISO parsing of backend timestamps)
# and identifier generation shared by the watering and account modules.

# 🔗 Dependencies:
# - datetime: Timestamp handling
# - uuid: Identifier generation

# 🔄 Connected Modules / Calls From:
# Watering screen and projection (start of day), Supabase repositories (timestamp parsing),
# watering log (event ids)

from datetime import datetime, timezone
from typing import Callable, Optional, Union
from uuid import uuid4

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def start_of_local_day(moment: Optional[datetime] = None) -> datetime:
    """
    Midnight of the local calendar day containing ``moment``.

    Args:
        moment: Aware datetime, defaults to now

    Returns:
        Aware datetime at local midnight
    """
    local = (moment or utc_now()).astimezone()
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a timestamp returned by the backend into an aware datetime.

    PostgREST serializes timestamptz as ISO 8601; naive values are taken as UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def generate_id() -> str:
    """Generate a new record identifier."""
    return str(uuid4())
