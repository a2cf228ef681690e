"""
Placement rules checked before a lesson is saved.

Nothing here raises for a rejected placement: a clash is an ordinary answer
and the caller decides how to report it.
"""

from typing import AbstractSet, Iterable, List, Optional

from .intervals import overlaps
from .models import Appointment
from .timegrid import DayWindow, date_key


def find_conflicts(
    candidate: Appointment,
    existing: Iterable[Appointment],
    editing_id: Optional[str] = None,
) -> List[Appointment]:
    """
    Return the lessons on the candidate's day that overlap it.

    Args:
        candidate: Lesson about to be saved
        existing: All stored lessons
        editing_id: Identifier of the lesson being edited, skipped so a lesson
            never clashes with its own previous version

    Returns:
        Overlapping lessons in the order they were given
    """
    candidate_day = candidate.date_key
    return [
        other for other in existing
        if other.id != editing_id
        and date_key(other.date) == candidate_day
        and overlaps(candidate.start_time, candidate.end_time, other.start_time, other.end_time)
    ]


def has_conflict(
    candidate: Appointment,
    existing: Iterable[Appointment],
    editing_id: Optional[str] = None,
) -> bool:
    """Check whether saving ``candidate`` would overlap another lesson."""
    candidate_day = candidate.date_key
    for other in existing:
        if other.id == editing_id or date_key(other.date) != candidate_day:
            continue
        if overlaps(candidate.start_time, candidate.end_time, other.start_time, other.end_time):
            return True
    return False


def is_day_selectable(day, day_offs: AbstractSet[str]) -> bool:
    """A day off accepts no new bookings, independent of any overlap."""
    return date_key(day) not in day_offs


def fits_window(candidate: Appointment, window: DayWindow) -> bool:
    """Check that the lesson starts and ends on grid boundaries inside the day."""
    return window.contains(candidate.start_time, candidate.end_time)
