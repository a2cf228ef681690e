"""
Narrowing the calendar down to one student, subject or set of statuses.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .models import Appointment
from .status import AppointmentStatus


@dataclass(frozen=True)
class AppointmentFilter:
    """
    Criteria for the lessons shown in the grid.

    Empty student and subject match everything; by default every status is
    shown.
    """
    student: Optional[str] = None
    subject: Optional[str] = None
    statuses: FrozenSet[AppointmentStatus] = field(
        default_factory=lambda: frozenset(AppointmentStatus)
    )

    def matches(self, appointment: Appointment) -> bool:
        if self.student and appointment.student != self.student:
            return False
        if self.subject and appointment.subject != self.subject:
            return False
        return appointment.status in self.statuses

    def apply(self, appointments: Iterable[Appointment]) -> Tuple[Appointment, ...]:
        """Keep matching lessons, preserving their order."""
        return tuple(appointment for appointment in appointments if self.matches(appointment))


def unique_students(appointments: Iterable[Appointment]) -> List[str]:
    """Sorted names of all students with at least one lesson."""
    return sorted({appointment.student for appointment in appointments if appointment.student})


def unique_subjects(appointments: Iterable[Appointment]) -> List[str]:
    """Sorted subjects taught in at least one lesson."""
    return sorted({appointment.subject for appointment in appointments if appointment.subject})
