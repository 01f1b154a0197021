# qrorder/services/business_day.py
from datetime import datetime, timedelta, tzinfo


def business_day_key(instant: datetime, rollover_hour: int, tz: tzinfo | None = None) -> str:
    """Return the "YYYY-MM-DD" service day an instant belongs to.

    Before ``rollover_hour`` (local time) the instant still counts towards
    the previous day, so a service that runs past midnight stays in one bucket.
    """
    local = instant.astimezone(tz) if tz is not None else instant
    if local.hour < rollover_hour:
        local = local - timedelta(days=1)
    return local.date().isoformat()
