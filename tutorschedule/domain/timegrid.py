"""
The half-hour slot grid a tutor's day is divided into, plus the date helpers
that key every appointment and day off to a calendar day.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, NamedTuple

import pendulum
from pendulum import Date

from .exceptions import FormatError
from .intervals import format_minutes, to_minutes


@dataclass(frozen=True)
class DayWindow:
    """
    Bookable hours of a day.

    The closing hour is itself a slot label: with the default window the last
    cell of the grid is ``22:00``.
    """
    start_hour: int = 8
    end_hour: int = 22
    interval_minutes: int = 30

    def __post_init__(self):
        if not 0 <= self.start_hour < self.end_hour <= 23:
            raise ValueError(
                f"Invalid day window {self.start_hour}:00 - {self.end_hour}:00"
            )
        if self.interval_minutes <= 0 or 60 % self.interval_minutes:
            raise ValueError(
                f"Slot interval must divide an hour, got {self.interval_minutes}"
            )

    @property
    def opens_at(self) -> int:
        return self.start_hour * 60

    @property
    def closes_at(self) -> int:
        return self.end_hour * 60

    def time_labels(self) -> List[str]:
        """All slot labels from opening through closing time, inclusive."""
        return [
            format_minutes(minute)
            for minute in range(self.opens_at, self.closes_at + 1, self.interval_minutes)
        ]

    def is_aligned(self, time_label: str) -> bool:
        """Check whether a label sits on a slot boundary of this window."""
        minute = to_minutes(time_label)
        return (
            self.opens_at <= minute <= self.closes_at
            and (minute - self.opens_at) % self.interval_minutes == 0
        )

    def contains(self, start_time: str, end_time: str) -> bool:
        """Check whether ``[start_time, end_time)`` fits the grid."""
        return (
            self.is_aligned(start_time)
            and self.is_aligned(end_time)
            and to_minutes(start_time) < to_minutes(end_time)
        )


class GridCell(NamedTuple):
    """One ``(date, time)`` position of the grid."""
    date: Date
    time: str


def as_date(value: "date | datetime | str") -> Date:
    """
    Normalise a calendar day to a ``pendulum.Date``.

    Strings must use the ``YYYY-MM-DD`` form; datetimes lose their time part.

    Raises:
        FormatError: If a string cannot be parsed
    """
    if isinstance(value, str):
        return parse_date(value)
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, Date):
        return value
    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)
    raise FormatError(f"Expected a calendar date, got {type(value).__name__}")


def parse_date(value: str) -> Date:
    """
    Parse a ``YYYY-MM-DD`` string.

    Raises:
        FormatError: If the string is not a valid date
    """
    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
    except (ValueError, AttributeError) as exc:
        raise FormatError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def date_key(value: "date | datetime | str") -> str:
    """Canonical ``YYYY-MM-DD`` key used for day offs and same-day checks."""
    return as_date(value).to_date_string()


def generate_time_grid(day: "date | str", window: DayWindow = DayWindow()) -> List[GridCell]:
    """
    Produce the ordered grid cells for one day.

    Example (default window):
        08:00, 08:30, ..., 21:30, 22:00
    """
    cell_date = as_date(day)
    return [GridCell(date=cell_date, time=label) for label in window.time_labels()]


def week_start(anchor: "date | str") -> Date:
    """
    Monday of the week containing ``anchor``.

    A Sunday belongs to the week that began six days earlier.
    """
    anchor_date = as_date(anchor)
    return anchor_date.subtract(days=anchor_date.isoweekday() - 1)


def week_dates(anchor: "date | str") -> List[Date]:
    """The seven days, Monday to Sunday, of the week containing ``anchor``."""
    monday = week_start(anchor)
    return [monday.add(days=offset) for offset in range(7)]


def is_weekend(day: "date | str") -> bool:
    """Check whether a day is a Saturday or a Sunday."""
    return as_date(day).isoweekday() >= 6
