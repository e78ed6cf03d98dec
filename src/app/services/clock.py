"""Clock Interface

Injectable source of "today" so overdue arithmetic uses one civil calendar.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from zoneinfo import ZoneInfo


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current civil time in the business timezone (naive)"""
        ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall clock pinned to the business timezone"""

    def __init__(self, timezone: str = "UTC"):
        self.timezone = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.timezone).replace(tzinfo=None)


class FixedClock(Clock):
    """Clock frozen at a given instant, for tests and replays"""

    def __init__(self, at: datetime):
        self.at = at

    def now(self) -> datetime:
        return self.at
