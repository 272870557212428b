"""Turn the schedule's free-text date and time range into timestamps."""

from datetime import datetime
from typing import Optional

from models import ScheduleTimes

# e.g. "Friday 4 Oct 2024 2:00 PM"
DATETIME_FORMAT = "%A %d %b %Y %I:%M %p"


class NormalizationError(ValueError):
    """Date or time text did not have the expected shape."""


def _strip_duration(date_text: str) -> str:
    """'Friday 4 Oct 2024 (1 hour)' -> 'Friday 4 Oct 2024'."""
    return date_text.split("(", 1)[0].strip()


def _split_time_range(time_range_text: str) -> tuple[str, str]:
    """'2:00 PM - 3:00 PM | 1 hour' -> ('2:00 PM', '3:00 PM')."""
    time_part = time_range_text.split("|", 1)[0]
    parts = [p.strip() for p in time_part.split("-")]
    if len(parts) != 2 or not all(parts):
        raise NormalizationError(f"Unrecognised time range: {time_range_text!r}")
    return parts[0], parts[1]


def _parse(date_part: str, clock: str) -> datetime:
    text = f"{date_part} {clock}"
    try:
        return datetime.strptime(text, DATETIME_FORMAT)
    except ValueError as e:
        raise NormalizationError(f"Cannot parse {text!r}: {e}") from e


def normalize_schedule(date_text: Optional[str], time_range_text: Optional[str]) -> ScheduleTimes:
    """
    Resolve a session's date and time range into absolute timestamps.

    Args:
        date_text: Date as shown on the session page, e.g. "Friday 4 Oct 2024 (1 hour)"
        time_range_text: Range as shown on the calendar, e.g. "2:00 PM - 3:00 PM | 1 hour"

    Returns:
        ScheduleTimes with the day's midnight, start and end. Timestamps are
        naive and keep the site's local clock.

    Raises:
        NormalizationError: If either text is missing or malformed.
    """
    if not date_text or not date_text.strip():
        raise NormalizationError("Missing session date")
    if not time_range_text or not time_range_text.strip():
        raise NormalizationError("Missing session time range")

    date_part = _strip_duration(date_text)
    if not date_part:
        raise NormalizationError(f"Unrecognised date: {date_text!r}")

    start_clock, end_clock = _split_time_range(time_range_text)
    start = _parse(date_part, start_clock)
    end = _parse(date_part, end_clock)

    return ScheduleTimes(
        date=start.replace(hour=0, minute=0, second=0, microsecond=0),
        start_time=start,
        end_time=end,
    )
