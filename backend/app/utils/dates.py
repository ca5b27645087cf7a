"""Calendar helpers pinned to the briefing timezone (Asia/Shanghai)."""

import re
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

SHANGHAI = ZoneInfo("Asia/Shanghai")


def is_date_string(value: object) -> bool:
    """Shape check only: ``2025-13-45`` passes."""
    return isinstance(value, str) and bool(DATE_PATTERN.match(value))


def today_in(tz: ZoneInfo = SHANGHAI, now: datetime | None = None) -> str:
    """Return today's calendar date in ``tz`` as YYYY-MM-DD."""
    now = now or datetime.now(UTC)
    return now.astimezone(tz).strftime("%Y-%m-%d")


def to_local_date(value: datetime | str, tz: ZoneInfo = SHANGHAI) -> str:
    """Format a timestamp as the calendar date it falls on in ``tz``."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(tz).strftime("%Y-%m-%d")


def shanghai_day_window(day: str) -> tuple[datetime, datetime]:
    """UTC bounds of a Shanghai calendar day.

    Shanghai is UTC+8 with no DST, so day D spans
    D-1 16:00:00Z .. D 15:59:59.999Z.
    """
    if not is_date_string(day):
        raise ValueError(f"Invalid date format: {day}. Expected YYYY-MM-DD")

    parsed = date.fromisoformat(day)
    start = datetime(parsed.year, parsed.month, parsed.day, tzinfo=SHANGHAI).astimezone(UTC)
    end = start + timedelta(days=1) - timedelta(milliseconds=1)
    return start, end


def day_start_utc(tz: ZoneInfo = SHANGHAI, now: datetime | None = None) -> datetime:
    """UTC instant of today's midnight in ``tz``."""
    local = (now or datetime.now(UTC)).astimezone(tz)
    return local.replace(hour=0, minute=0, second=0, microsecond=0).astimezone(UTC)
