"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .conflicts import find_conflicts, fits_window, has_conflict, is_day_selectable
from .exceptions import (
    AppointmentNotFoundError,
    FormatError,
    InvalidAppointmentError,
    ScheduleError,
    StoreError,
)
from .filters import AppointmentFilter
from .intervals import Duration, compute_end_time, is_time_between, overlaps, to_minutes
from .models import Appointment, DayView, Slot, WeekView
from .mutations import (
    Applied,
    FlagChange,
    RequiresConfirmation,
    confirm,
    propose_day_off,
    propose_delete,
    propose_flag_change,
)
from .status import AppointmentStatus, resolve_status
from .timegrid import DayWindow, GridCell, date_key, generate_time_grid, week_dates
from .week_view import WeekViewBuilder

__all__ = [
    "Appointment",
    "AppointmentFilter",
    "AppointmentNotFoundError",
    "AppointmentStatus",
    "Applied",
    "DayView",
    "DayWindow",
    "Duration",
    "FlagChange",
    "FormatError",
    "GridCell",
    "InvalidAppointmentError",
    "RequiresConfirmation",
    "ScheduleError",
    "Slot",
    "StoreError",
    "WeekView",
    "WeekViewBuilder",
    "compute_end_time",
    "confirm",
    "date_key",
    "find_conflicts",
    "fits_window",
    "generate_time_grid",
    "has_conflict",
    "is_day_selectable",
    "is_time_between",
    "overlaps",
    "propose_day_off",
    "propose_delete",
    "propose_flag_change",
    "resolve_status",
    "to_minutes",
    "week_dates",
]
