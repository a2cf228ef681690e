"""
Time-of-day arithmetic on ``HH:MM`` labels.

All lesson times are wall-clock strings on a fixed 24-hour clock. Every
comparison goes through ``to_minutes`` so that a malformed label fails loudly
instead of sorting somewhere unexpected.
"""

import re
from enum import Enum

from .exceptions import FormatError

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"(\d{2}):(\d{2})", re.ASCII)


class Duration(str, Enum):
    """
    Lesson length as offered in the booking form.

    The values are the labels stored with each appointment.
    """
    ONE_HOUR = "1 час"
    NINETY_MINUTES = "1 час 30 минут"
    TWO_HOURS = "2 часа"

    @property
    def minutes(self) -> int:
        """Length of the lesson in minutes."""
        return _DURATION_MINUTES[self]

    @classmethod
    def parse(cls, value: "Duration | str | int") -> "Duration":
        """
        Resolve a duration from its label or its length in minutes.

        Raises:
            FormatError: If the value names no known duration
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, int) and not isinstance(value, bool):
            for duration, minutes in _DURATION_MINUTES.items():
                if minutes == value:
                    return duration
            raise FormatError(f"Unsupported lesson length: {value} minutes")

        try:
            return cls(value)
        except ValueError:
            raise FormatError(f"Unknown duration code: {value!r}") from None


_DURATION_MINUTES = {
    Duration.ONE_HOUR: 60,
    Duration.NINETY_MINUTES: 90,
    Duration.TWO_HOURS: 120,
}


def to_minutes(time_label: str) -> int:
    """
    Convert an ``HH:MM`` label to minutes since midnight.

    Raises:
        FormatError: If the label is not a valid 24-hour time
    """
    if not isinstance(time_label, str):
        raise FormatError(f"Time must be a string, got {type(time_label).__name__}")

    if ":" not in time_label:
        raise FormatError(f"Time {time_label!r} is missing the ':' separator")

    match = _TIME_PATTERN.fullmatch(time_label)
    if match is None:
        raise FormatError(f"Time {time_label!r} is not in HH:MM format")

    hour = int(match.group(1))
    minute = int(match.group(2))

    if not 0 <= hour <= 23:
        raise FormatError(f"Hour must be between 0 and 23, got {hour}")
    if not 0 <= minute <= 59:
        raise FormatError(f"Minute must be between 0 and 59, got {minute}")

    return hour * 60 + minute


def format_minutes(total_minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``, wrapping past midnight."""
    total_minutes %= MINUTES_PER_DAY
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def compute_end_time(start_time: str, duration: "Duration | str | int") -> str:
    """
    Return the end label for a lesson starting at ``start_time``.

    The result is not clamped to the working day; a lesson booked close to
    closing time can end after the last slot.
    """
    return format_minutes(to_minutes(start_time) + Duration.parse(duration).minutes)


def overlaps(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """
    Check whether two half-open ranges ``[start, end)`` intersect.

    Ranges that only touch (one ends when the other starts) do not overlap.
    """
    return to_minutes(start_a) < to_minutes(end_b) and to_minutes(end_a) > to_minutes(start_b)


def is_time_between(time_label: str, start_time: str, end_time: str) -> bool:
    """Check whether ``time_label`` falls inside ``[start_time, end_time)``."""
    moment = to_minutes(time_label)
    return to_minutes(start_time) <= moment < to_minutes(end_time)


def slot_count(start_time: str, end_time: str, interval_minutes: int = 30) -> int:
    """Number of grid slots covered by ``[start_time, end_time)``."""
    span = to_minutes(end_time) - to_minutes(start_time)
    return max(span // interval_minutes, 0)
