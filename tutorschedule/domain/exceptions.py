"""
Domain-specific exception hierarchy for the tutor schedule application.
"""


class ScheduleError(Exception):
    """Base class for all application-level errors."""


class FormatError(ScheduleError, ValueError):
    """Raised when a time, date or duration value cannot be parsed."""


class InvalidAppointmentError(ScheduleError, ValueError):
    """Raised when an appointment violates its own invariants."""


class StoreError(ScheduleError):
    """Raised when appointment data cannot be loaded or saved."""


class AppointmentNotFoundError(StoreError):
    """Raised when an update or delete targets an unknown identifier."""
