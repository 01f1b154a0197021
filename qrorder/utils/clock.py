# qrorder/utils/clock.py
from datetime import datetime
from zoneinfo import ZoneInfo

from qrorder.utils.settings import TIMEZONE


class Clock:
    """Source of "now", swapped out in tests."""

    def __init__(self, tz: str | None = None):
        self.tz = ZoneInfo(tz or TIMEZONE)

    def now(self) -> datetime:
        return datetime.now(self.tz)
