"""Wall-clock helpers for 12-hour "h:mm AM/PM" time strings.

Times are plain time-of-day values with no date or timezone attached. They
exist only so that two slots on the same weekday can be compared.
"""

import re
from datetime import time
from typing import Union

from weekplanner.exceptions import InvalidTimeError

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")

# Choices for a time picker, in 30-minute steps.
TIME_OPTIONS = tuple(
    f"{(h - 1) % 12 + 1}:{m:02d} {'AM' if h < 12 else 'PM'}"
    for h in range(7, 20)
    for m in (0, 30)
    if not (h == 19 and m == 30)
)


def parse_time(text: str) -> time:
    """Parse a 12-hour time string into a ``datetime.time``.

    "12:xx AM" maps to 00:xx and "12:xx PM" maps to 12:xx.

    Args:
        text: Time such as "9:00 AM" or "2:30 pm".

    Returns:
        The corresponding time of day.

    Raises:
        InvalidTimeError: If the string is not a valid 12-hour time.
    """
    if not isinstance(text, str):
        raise InvalidTimeError(f"Expected a time string, got {type(text).__name__}")

    match = _TIME_PATTERN.match(text)
    if match is None:
        raise InvalidTimeError(f"Invalid time {text!r}; expected 'h:mm AM/PM'")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    modifier = match.group(3).upper()

    if not 1 <= hours <= 12:
        raise InvalidTimeError(f"Invalid hour in {text!r}; expected 1-12")
    if minutes > 59:
        raise InvalidTimeError(f"Invalid minutes in {text!r}; expected 00-59")

    if hours == 12:
        hours = 0 if modifier == "AM" else 12
    elif modifier == "PM":
        hours += 12

    return time(hour=hours, minute=minutes)


def format_time(value: time) -> str:
    """Format a time of day as "h:mm AM/PM"."""
    modifier = "AM" if value.hour < 12 else "PM"
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {modifier}"


def time_to_decimal(value: Union[str, time]) -> float:
    """Convert a time of day into decimal hours since midnight.

    Example:
        >>> time_to_decimal("2:30 PM")
        14.5
    """
    if isinstance(value, str):
        value = parse_time(value)
    return value.hour + value.minute / 60


def format_time_range(start: time, end: time) -> str:
    """Format a start/end pair for display, e.g. "9:00 AM - 10:30 AM"."""
    return f"{format_time(start)} - {format_time(end)}"
