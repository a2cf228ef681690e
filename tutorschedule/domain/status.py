"""
Lesson lifecycle status derived from the three stored flags.
"""

from enum import Enum


class AppointmentStatus(str, Enum):
    """Lifecycle status of a lesson, lowest to highest priority."""
    NOT_CONFIRMED = "not-confirmed"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    PAID = "paid"

    @property
    def label(self) -> str:
        """Display text shown in the grid and in exported reports."""
        return STATUS_LABELS[self]


STATUS_LABELS = {
    AppointmentStatus.NOT_CONFIRMED: "Не подтверждено",
    AppointmentStatus.CONFIRMED: "Подтверждено",
    AppointmentStatus.COMPLETED: "Проведено",
    AppointmentStatus.PAID: "Оплачено",
}


def resolve_status(is_confirmed: bool, is_completed: bool, is_paid: bool) -> AppointmentStatus:
    """
    Classify a lesson by its highest set flag: paid, completed, confirmed.

    The flags are not cross-checked; a paid lesson that is not marked as
    completed is still reported as paid.
    """
    if is_paid:
        return AppointmentStatus.PAID
    if is_completed:
        return AppointmentStatus.COMPLETED
    if is_confirmed:
        return AppointmentStatus.CONFIRMED
    return AppointmentStatus.NOT_CONFIRMED
