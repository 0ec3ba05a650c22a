from datetime import datetime
from flask import current_app
import pytz


class SystemClock:
    """Wall-clock time source.

    ``today()`` is the calendar date in the configured zone, which is what
    ``registration_date`` records.
    """

    def __init__(self, tz_name: str = "UTC"):
        self.tz = pytz.timezone(tz_name)

    def now(self) -> datetime:
        return datetime.now(pytz.UTC)

    def today(self) -> str:
        return self.now().astimezone(self.tz).date().isoformat()


class FixedClock(SystemClock):
    """Clock pinned to a single instant."""

    def __init__(self, instant: datetime, tz_name: str = "UTC"):
        super().__init__(tz_name)
        if instant.tzinfo is None:
            instant = pytz.UTC.localize(instant)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


def get_clock(clock=None):
    """Returns ``clock`` or the application's configured clock."""
    if clock is not None:
        return clock
    return current_app.config["CLOCK"]


def local_date(instant: datetime, tz) -> str:
    """Calendar date of ``instant`` in ``tz``; naive values are read as UTC."""
    if instant.tzinfo is None:
        instant = pytz.UTC.localize(instant)
    return instant.astimezone(tz).date().isoformat()
