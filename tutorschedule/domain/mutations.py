"""
Changes that may need the tutor's explicit approval before they are stored.

Every ``propose_*`` function returns either ``Applied`` (safe to store right
away) or ``RequiresConfirmation`` (ask first, then ``confirm``). Proposals
never touch persistence; they only compute the value that would be stored.
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import AbstractSet, FrozenSet, Generic, Iterable, TypeVar, Union

from .exceptions import InvalidAppointmentError
from .models import Appointment
from .timegrid import date_key

T = TypeVar("T")


class FlagChange(str, Enum):
    """A single tick or untick of one of the lesson's status boxes."""
    CONFIRM = "confirm"
    UNCONFIRM = "unconfirm"
    COMPLETE = "complete"
    UNCOMPLETE = "uncomplete"
    PAY = "pay"
    UNPAY = "unpay"


_FLAG_UPDATES = {
    FlagChange.CONFIRM: {"is_confirmed": True},
    FlagChange.UNCONFIRM: {"is_confirmed": False},
    FlagChange.COMPLETE: {"is_completed": True},
    # A lesson that did not take place cannot stay paid.
    FlagChange.UNCOMPLETE: {"is_completed": False, "is_paid": False},
    FlagChange.PAY: {"is_paid": True},
    FlagChange.UNPAY: {"is_paid": False},
}


@dataclass(frozen=True)
class Applied(Generic[T]):
    """The change is harmless; ``value`` can be stored directly."""
    value: T


@dataclass(frozen=True)
class RequiresConfirmation(Generic[T]):
    """The change needs approval; ``pending`` is stored only once confirmed."""
    reason: str
    pending: T


Proposal = Union[Applied[T], RequiresConfirmation[T]]


def confirm(request: RequiresConfirmation[T]) -> T:
    """Approve a pending change and return the value to store."""
    return request.pending


def propose_flag_change(appointment: Appointment, change: FlagChange) -> Proposal[Appointment]:
    """
    Tick or untick a status box.

    Unticking "completed" on a completed lesson also unticks "paid" and must be
    confirmed, since it discards a recorded payment.

    Raises:
        InvalidAppointmentError: If "paid" is ticked on a lesson not completed
    """
    change = FlagChange(change)
    if change is FlagChange.PAY and not appointment.is_completed:
        raise InvalidAppointmentError("Оплатить можно только проведённое занятие.")

    updated = replace(appointment, **_FLAG_UPDATES[change])

    if change is FlagChange.UNCOMPLETE and appointment.is_completed:
        reason = "Снять отметку о проведении занятия? Отметка об оплате также будет снята."
        return RequiresConfirmation(reason=reason, pending=updated)

    return Applied(value=updated)


def propose_delete(appointment: Appointment) -> RequiresConfirmation[str]:
    """Deleting is always confirmed; the pending value is the lesson id."""
    return RequiresConfirmation(
        reason="Вы уверены, что хотите удалить эту запись?",
        pending=appointment.id,
    )


def propose_day_off(
    day: "date | str",
    day_offs: AbstractSet[str],
    appointments: Iterable[Appointment],
    is_day_off: bool,
) -> Proposal[FrozenSet[str]]:
    """
    Mark a day as a day off, or open it for booking again.

    Lessons already on that day are kept; the confirmation text warns about
    them.
    """
    key = date_key(day)
    current = frozenset(day_offs)

    if (key in current) == is_day_off:
        return Applied(value=current)

    if is_day_off:
        updated = current | {key}
        if any(date_key(appointment.date) == key for appointment in appointments):
            reason = "На этот день есть записи. Вы уверены, что хотите отметить его как выходной?"
        else:
            reason = "Вы уверены, что хотите отметить этот день как выходной?"
    else:
        updated = current - {key}
        reason = "Вы уверены, что хотите отметить этот день как рабочий?"

    return RequiresConfirmation(reason=reason, pending=updated)
