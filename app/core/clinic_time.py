"""Wall-clock time handling for bookings and clinic-local display strings."""

import re
from datetime import date, datetime, timedelta

import pytz

from app.config import settings

_TIME_RE = re.compile(r"^([0-9]{2}):([0-9]{2})(?::([0-9]{2}))?$")


def normalize_time(value: str) -> str:
    """
    Normalize a wall-clock time to ``HH:MM:SS``.

    The result stays a plain string so that the booked time reaches the
    database exactly as the client sent it.

    Args:
        value: Time as ``HH:MM`` or ``HH:MM:SS``

    Returns:
        Time as ``HH:MM:SS``

    Raises:
        ValueError: If the format or any component is invalid
    """
    match = _TIME_RE.match(value.strip()) if value else None
    if not match:
        raise ValueError("Invalid time; expected HH:MM or HH:MM:SS")

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        raise ValueError("Invalid time components")

    return f"{hour:02d}:{minute:02d}:{second:02d}"


def clinic_tz() -> pytz.BaseTzInfo:
    """Get the configured clinic time zone."""
    return pytz.timezone(settings.clinic_timezone)


def clinic_now() -> datetime:
    """Current time in the clinic time zone."""
    return datetime.now(clinic_tz())


def tomorrow_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    Naive clinic wall-clock bounds of tomorrow, ``[start, end)``.

    Appointment timestamps are stored as clinic wall-clock values, so the
    bounds carry no tzinfo.
    """
    current = now or clinic_now()
    if current.tzinfo is not None:
        current = current.astimezone(clinic_tz())
    tomorrow: date = current.date() + timedelta(days=1)
    start = datetime(tomorrow.year, tomorrow.month, tomorrow.day)
    return start, start + timedelta(days=1)


def format_clinic_time(value: datetime) -> str:
    """
    Format an appointment time for emails and listings, e.g. ``2 Sep 2025, 12:00 PM IST``.

    Naive values are clinic wall-clock times and are only labelled; aware
    values are converted to the clinic zone first.
    """
    tz = clinic_tz()
    local = tz.localize(value) if value.tzinfo is None else value.astimezone(tz)
    hour = local.hour % 12 or 12
    return f"{local.day} {local:%b %Y}, {hour}:{local:%M %p %Z}"
