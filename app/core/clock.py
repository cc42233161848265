"""Local wall clock used by the scheduling services."""

from collections.abc import Callable
from datetime import datetime

# Returns the current naive local time. Services take one so tests can pin "now".
Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current local time."""
    return datetime.now()


def to_minute(value: datetime) -> datetime:
    """
    Normalize a timestamp to the engine's resolution.

    Aware datetimes are converted to local time and made naive; seconds and
    microseconds are dropped.
    """
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.replace(second=0, microsecond=0)
