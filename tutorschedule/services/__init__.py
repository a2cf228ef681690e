"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .scheduler import AppointmentStoreProtocol, SaveRejection, SaveResult, ScheduleService

__all__ = ["AppointmentStoreProtocol", "SaveRejection", "SaveResult", "ScheduleService"]
