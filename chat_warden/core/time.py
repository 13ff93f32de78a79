from __future__ import annotations

import datetime
import re

MSK_TZ = datetime.timezone(datetime.timedelta(hours=3))

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{1,2})$")


def make_timezone(offset_hours: float) -> datetime.timezone:
    if not offset_hours:
        return datetime.timezone.utc
    return datetime.timezone(datetime.timedelta(hours=offset_hours))


def utc_now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def parse_time_of_day(value) -> tuple[int, int] | None:
    """Return (hour, minute) for a valid ``HH:MM`` string, otherwise None."""
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value.strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def validate_time_string(value) -> bool:
    return parse_time_of_day(value) is not None


def normalize_time_string(value: str) -> str | None:
    parsed = parse_time_of_day(value)
    if parsed is None:
        return None
    return f"{parsed[0]:02d}:{parsed[1]:02d}"


def format_hhmm(now: datetime.datetime | None = None, tz: datetime.tzinfo = MSK_TZ) -> str:
    if now is None:
        now = datetime.datetime.now(tz)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc).astimezone(tz)
    else:
        now = now.astimezone(tz)
    return now.strftime("%H:%M")
