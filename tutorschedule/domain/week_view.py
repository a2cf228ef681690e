"""
Builds the week grid shown to the tutor.

This is the heart of the application: it lays the (already filtered) lessons
over each day's slot grid without any I/O.
"""

from collections import defaultdict
from datetime import date
from typing import AbstractSet, Dict, Iterable, List

from .conflicts import is_day_selectable
from .intervals import is_time_between, slot_count
from .models import Appointment, DayView, Slot, WeekView
from .timegrid import DayWindow, as_date, date_key, generate_time_grid, is_weekend, week_dates


class WeekViewBuilder:
    """
    Lays lessons over the slot grid of a week.

    Algorithm:
    1. Resolve the seven days of the anchor's week (Monday first)
    2. Generate the slot grid of every day
    3. Attach the lesson whose ``[start, end)`` contains each slot
    4. Mark the lesson's first slot as the start cell spanning the whole
       lesson; the remaining slots become continuation cells
    5. Flag weekends and days off
    """

    def __init__(self, window: DayWindow = DayWindow()):
        self.window = window

    def build(
        self,
        anchor: "date | str",
        appointments: Iterable[Appointment],
        day_offs: AbstractSet[str] = frozenset(),
    ) -> WeekView:
        """
        Build the view of the week containing ``anchor``.

        Args:
            anchor: Any day of the requested week
            appointments: Lessons to show; filtering happens beforehand
            day_offs: ``YYYY-MM-DD`` keys of days closed for booking

        Raises:
            FormatError: If a lesson carries a malformed time
        """
        by_day = self._group_by_day(appointments)

        days = tuple(
            self.build_day(day, by_day.get(date_key(day), []), day_offs)
            for day in week_dates(anchor)
        )
        return WeekView(days=days)

    def build_day(
        self,
        day: "date | str",
        appointments: List[Appointment],
        day_offs: AbstractSet[str] = frozenset(),
    ) -> DayView:
        """Build one day column from the lessons already known to be on it."""
        is_day_off = not is_day_selectable(day, day_offs)
        slots = []

        for cell in generate_time_grid(day, self.window):
            appointment = self._find_occupant(cell.time, appointments)
            is_start = appointment is not None and appointment.start_time == cell.time
            row_span = 1
            if is_start:
                row_span = max(
                    slot_count(appointment.start_time, appointment.end_time, self.window.interval_minutes),
                    1,
                )

            slots.append(
                Slot(
                    date=cell.date,
                    time=cell.time,
                    appointment=appointment,
                    is_start=is_start,
                    row_span=row_span,
                    is_selectable=not is_day_off,
                )
            )

        return DayView(
            date=as_date(day),
            is_weekend=is_weekend(day),
            is_day_off=is_day_off,
            slots=tuple(slots),
        )

    @staticmethod
    def _group_by_day(appointments: Iterable[Appointment]) -> Dict[str, List[Appointment]]:
        by_day: Dict[str, List[Appointment]] = defaultdict(list)
        for appointment in appointments:
            by_day[date_key(appointment.date)].append(appointment)
        return by_day

    @staticmethod
    def _find_occupant(time_label: str, appointments: List[Appointment]) -> "Appointment | None":
        for appointment in appointments:
            if is_time_between(time_label, appointment.start_time, appointment.end_time):
                return appointment
        return None
