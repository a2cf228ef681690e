"""
Domain models for lessons and the week grid built from them.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional, Tuple

from pendulum import Date

from .exceptions import InvalidAppointmentError
from .intervals import Duration, compute_end_time, to_minutes
from .status import AppointmentStatus, resolve_status
from .timegrid import as_date, date_key


def new_appointment_id() -> str:
    """Generate an identifier for a lesson saved for the first time."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Appointment:
    """
    A booked lesson.

    Invariants: start is before end, and the end matches start plus duration.
    The three flags are stored independently; see ``status``.
    """
    date: Date
    start_time: str
    end_time: str
    student: str = ""
    subject: str = ""
    duration: Duration = Duration.ONE_HOUR
    price: float = 0
    comment: str = ""
    homework: str = ""
    studied: str = ""
    is_confirmed: bool = False
    is_completed: bool = False
    is_paid: bool = False
    id: str = field(default_factory=new_appointment_id)

    def __post_init__(self):
        object.__setattr__(self, "date", as_date(self.date))
        object.__setattr__(self, "duration", Duration.parse(self.duration))

        if to_minutes(self.start_time) >= to_minutes(self.end_time):
            raise InvalidAppointmentError(
                f"Start time {self.start_time} must be before end time {self.end_time}"
            )

        expected_end = compute_end_time(self.start_time, self.duration)
        if expected_end != self.end_time:
            raise InvalidAppointmentError(
                f"End time {self.end_time} does not match a {self.duration.minutes} minute "
                f"lesson starting at {self.start_time} (expected {expected_end})"
            )

        if self.price < 0:
            raise InvalidAppointmentError(f"Price must not be negative, got {self.price}")

    @classmethod
    def book(
        cls,
        day: "date | str",
        start_time: str,
        duration: "Duration | str | int" = Duration.ONE_HOUR,
        **details,
    ) -> "Appointment":
        """Create a lesson, deriving the end time from its duration."""
        duration = Duration.parse(duration)
        return cls(
            date=as_date(day),
            start_time=start_time,
            end_time=compute_end_time(start_time, duration),
            duration=duration,
            **details,
        )

    @property
    def date_key(self) -> str:
        return date_key(self.date)

    @property
    def status(self) -> AppointmentStatus:
        return resolve_status(self.is_confirmed, self.is_completed, self.is_paid)

    def rescheduled(
        self,
        day: "date | str | None" = None,
        start_time: Optional[str] = None,
        duration: "Duration | str | int | None" = None,
    ) -> "Appointment":
        """
        Copy of this lesson moved to another day, time or length.

        The end time is recomputed so it stays consistent with the duration.
        """
        new_start = start_time or self.start_time
        new_duration = Duration.parse(duration) if duration is not None else self.duration
        return replace(
            self,
            date=as_date(day) if day is not None else self.date,
            start_time=new_start,
            end_time=compute_end_time(new_start, new_duration),
            duration=new_duration,
        )

    def __str__(self) -> str:
        return f"{self.date.format('DD.MM.YYYY')} {self.start_time} - {self.end_time} {self.student}"


@dataclass(frozen=True)
class Slot:
    """
    One cell of the week grid.

    Continuation cells (``appointment`` set, ``is_start`` false) are merged
    into the start cell above them and must not be rendered on their own.
    """
    date: Date
    time: str
    appointment: Optional[Appointment] = None
    is_start: bool = False
    row_span: int = 1
    is_selectable: bool = True

    @property
    def is_free(self) -> bool:
        return self.appointment is None

    @property
    def is_continuation(self) -> bool:
        return self.appointment is not None and not self.is_start


@dataclass(frozen=True)
class DayView:
    """A single day column of the week grid."""
    date: Date
    is_weekend: bool
    is_day_off: bool
    slots: Tuple[Slot, ...]

    @property
    def appointments(self) -> Tuple[Appointment, ...]:
        """Lessons shown on this day, in start-time order."""
        return tuple(slot.appointment for slot in self.slots if slot.is_start)


@dataclass(frozen=True)
class WeekView:
    """Seven day columns, Monday first."""
    days: Tuple[DayView, ...]

    @property
    def start(self) -> Date:
        return self.days[0].date

    @property
    def end(self) -> Date:
        return self.days[-1].date

    def day(self, day: "date | str") -> DayView:
        """Look up the column for a day of this week."""
        key = date_key(day)
        for day_view in self.days:
            if date_key(day_view.date) == key:
                return day_view
        raise KeyError(f"{key} is not part of the week starting {self.start}")

    def slot(self, day: "date | str", time_label: str) -> Slot:
        """Look up a single cell by day and time label."""
        for slot in self.day(day).slots:
            if slot.time == time_label:
                return slot
        raise KeyError(f"No slot at {time_label} on {date_key(day)}")
