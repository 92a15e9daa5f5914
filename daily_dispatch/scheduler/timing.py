"""Next-run arithmetic for the daily schedule, on a fixed UTC offset (no DST)."""

from datetime import datetime, timedelta, timezone
from typing import Optional

PHT_OFFSET = timezone(timedelta(hours=8), "PHT")
SCHEDULED_HOUR = 3
SCHEDULED_MINUTE = 0


def fixed_offset(hours: int) -> timezone:
    if hours == 8:
        return PHT_OFFSET
    return timezone(timedelta(hours=hours))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_time(now: Optional[datetime] = None, offset: timezone = PHT_OFFSET) -> datetime:
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(offset)


def next_run_at(
    now: Optional[datetime] = None,
    hour: int = SCHEDULED_HOUR,
    minute: int = SCHEDULED_MINUTE,
    offset: timezone = PHT_OFFSET,
) -> datetime:
    """Next HH:MM in ``offset``; a run exactly at HH:MM goes to the next day."""
    local = local_time(now, offset)
    target = local.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if local >= target:
        target += timedelta(days=1)
    return target.astimezone(timezone.utc)


def milliseconds_until_next_run(
    now: Optional[datetime] = None,
    hour: int = SCHEDULED_HOUR,
    minute: int = SCHEDULED_MINUTE,
    offset: timezone = PHT_OFFSET,
) -> int:
    """
    Delay until the next scheduled run, rounded up to whole milliseconds.

    Args:
        now: Current instant; naive values are treated as UTC
        hour: Scheduled hour in ``offset``
        minute: Scheduled minute in ``offset``
        offset: Fixed UTC offset of the schedule

    Returns:
        Milliseconds in (0, 24h]
    """
    now = local_time(now, timezone.utc)
    delta = next_run_at(now, hour, minute, offset) - now
    return -(-delta // timedelta(milliseconds=1))


def format_time(dt: datetime, offset: timezone = PHT_OFFSET) -> str:
    return local_time(dt, offset).strftime("%b %d, %Y, %I:%M:%S %p")
