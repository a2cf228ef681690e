"""
Application service for the tutor's calendar.

The service loads snapshots from a store adapter, hands them to the pure
domain functions and writes back whatever the tutor accepted. Keeping the
store behind a protocol lets tests swap in an in-memory stub.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Optional, Protocol, Sequence

from ..adapters.report import build_report_rows, default_report_name, write_report_csv
from ..domain.conflicts import find_conflicts, fits_window, is_day_selectable
from ..domain.exceptions import AppointmentNotFoundError
from ..domain.filters import AppointmentFilter, unique_students, unique_subjects
from ..domain.models import Appointment, WeekView
from ..domain.mutations import (
    FlagChange,
    Proposal,
    RequiresConfirmation,
    confirm,
    propose_day_off,
    propose_delete,
    propose_flag_change,
)
from ..domain.timegrid import DayWindow
from ..domain.week_view import WeekViewBuilder

logger = logging.getLogger(__name__)


class AppointmentStoreProtocol(Protocol):
    """Protocol describing the persistence behaviour needed by the service."""

    def list_appointments(self) -> List[Appointment]:
        """Return every stored lesson."""

    def list_day_offs(self) -> FrozenSet[str]:
        """Return the ``YYYY-MM-DD`` keys of all days off."""

    def insert(self, appointment: Appointment) -> None:
        """Store a new lesson."""

    def update(self, appointment: Appointment) -> None:
        """Replace the lesson with the same id."""

    def delete(self, appointment_id: str) -> None:
        """Remove a lesson by id."""

    def replace_day_offs(self, day_offs: FrozenSet[str]) -> None:
        """Store the complete set of days off."""


class SaveRejection(str, Enum):
    """Why a lesson was not saved."""
    DAY_OFF = "day-off"
    OUTSIDE_WINDOW = "outside-window"
    CONFLICT = "conflict"


REJECTION_MESSAGES = {
    SaveRejection.DAY_OFF: "Этот день отмечен как выходной.",
    SaveRejection.OUTSIDE_WINDOW: "Время занятия выходит за пределы рабочего дня.",
    SaveRejection.CONFLICT: (
        "Невозможно сохранить запись. Обнаружено пересечение с существующей записью."
    ),
}


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save attempt; a rejection is a normal result."""
    appointment: Appointment
    rejection: Optional[SaveRejection] = None
    conflicts: Sequence[Appointment] = field(default_factory=tuple)

    @property
    def saved(self) -> bool:
        return self.rejection is None

    @property
    def message(self) -> str:
        if self.rejection is None:
            return "Запись сохранена."
        return REJECTION_MESSAGES[self.rejection]


class ScheduleService:
    """
    Orchestrates store access and the scheduling engine.

    The service holds no calendar state of its own: every call reads fresh
    snapshots from the store.
    """

    def __init__(
        self,
        store: AppointmentStoreProtocol,
        window: DayWindow = DayWindow(),
    ) -> None:
        self._store = store
        self._window = window
        self._builder = WeekViewBuilder(window=window)

    @property
    def window(self) -> DayWindow:
        return self._window

    def appointments(self) -> List[Appointment]:
        return list(self._store.list_appointments())

    def day_offs(self) -> FrozenSet[str]:
        return frozenset(self._store.list_day_offs())

    def get_appointment(self, appointment_id: str) -> Appointment:
        """
        Raises:
            AppointmentNotFoundError: If no lesson has this id
        """
        for appointment in self._store.list_appointments():
            if appointment.id == appointment_id:
                return appointment
        raise AppointmentNotFoundError(f"Appointment {appointment_id} not found")

    def week_view(
        self,
        anchor: "date | str",
        appointment_filter: Optional[AppointmentFilter] = None,
    ) -> WeekView:
        """Build the grid for the week containing ``anchor``."""
        appointments = self._store.list_appointments()
        if appointment_filter is not None:
            appointments = appointment_filter.apply(appointments)

        return self._builder.build(anchor, appointments, self.day_offs())

    def save_appointment(
        self,
        appointment: Appointment,
        editing_id: Optional[str] = None,
    ) -> SaveResult:
        """
        Insert a new lesson or update the one identified by ``editing_id``.

        Lessons cannot be placed on a day off, either as new bookings or by
        moving them there. Lessons already on such a day can still be edited
        in place.

        Raises:
            AppointmentNotFoundError: If ``editing_id`` names no stored lesson
        """
        existing = self._store.list_appointments()

        placed_on = appointment.date_key
        if editing_id is not None:
            stored = self.get_appointment(editing_id)
            appointment = replace(appointment, id=stored.id)
            if stored.date_key == appointment.date_key:
                placed_on = None

        if placed_on is not None and not is_day_selectable(placed_on, self.day_offs()):
            logger.info("Refused placing a lesson on day off %s", placed_on)
            return SaveResult(appointment=appointment, rejection=SaveRejection.DAY_OFF)

        if not fits_window(appointment, self._window):
            logger.info(
                "Refused booking %s-%s outside the day window",
                appointment.start_time,
                appointment.end_time,
            )
            return SaveResult(appointment=appointment, rejection=SaveRejection.OUTSIDE_WINDOW)

        conflicts = find_conflicts(appointment, existing, editing_id=editing_id)
        if conflicts:
            logger.info(
                "Refused booking %s on %s: overlaps %d lesson(s)",
                appointment.start_time,
                appointment.date_key,
                len(conflicts),
            )
            return SaveResult(
                appointment=appointment,
                rejection=SaveRejection.CONFLICT,
                conflicts=tuple(conflicts),
            )

        if editing_id is None:
            self._store.insert(appointment)
        else:
            self._store.update(appointment)

        return SaveResult(appointment=appointment)

    def propose_delete(self, appointment_id: str) -> RequiresConfirmation[str]:
        return propose_delete(self.get_appointment(appointment_id))

    def commit_delete(self, request: RequiresConfirmation[str]) -> None:
        self._store.delete(confirm(request))

    def change_flag(self, appointment_id: str, change: FlagChange) -> Proposal[Appointment]:
        """
        Apply a status tick right away, or return it for confirmation.
        """
        proposal = propose_flag_change(self.get_appointment(appointment_id), change)
        if isinstance(proposal, RequiresConfirmation):
            return proposal

        self._store.update(proposal.value)
        return proposal

    def commit_flag_change(self, request: RequiresConfirmation[Appointment]) -> Appointment:
        appointment = confirm(request)
        self._store.update(appointment)
        return appointment

    def propose_day_off(self, day: "date | str", is_day_off: bool) -> Proposal[FrozenSet[str]]:
        return propose_day_off(day, self.day_offs(), self._store.list_appointments(), is_day_off)

    def commit_day_off(self, request: RequiresConfirmation[FrozenSet[str]]) -> FrozenSet[str]:
        day_offs = confirm(request)
        self._store.replace_day_offs(day_offs)
        return day_offs

    def students(self) -> List[str]:
        return unique_students(self._store.list_appointments())

    def subjects(self) -> List[str]:
        return unique_subjects(self._store.list_appointments())

    def export(
        self,
        start: "date | str",
        end: "date | str",
        path: Optional[Path] = None,
    ) -> Path:
        """Write the lessons between ``start`` and ``end`` to a CSV report."""
        rows = build_report_rows(self._store.list_appointments(), start, end)
        return write_report_csv(rows, path or Path(default_report_name(start, end)))
