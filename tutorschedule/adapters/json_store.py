"""
JSON file persistence for lessons and days off.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, List

from ..domain.exceptions import AppointmentNotFoundError, ScheduleError, StoreError
from ..domain.intervals import Duration
from ..domain.models import Appointment
from ..domain.timegrid import date_key

logger = logging.getLogger(__name__)


class JsonAppointmentStore:
    """
    Keeps the whole calendar in one JSON document.

    Layout::

        {
          "appointments": [{"id": "...", "date": "2024-06-03", ...}],
          "day_offs": ["2024-06-08"]
        }

    Every write rewrites the file. A missing file is an empty calendar.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def list_appointments(self) -> List[Appointment]:
        """Load all stored lessons."""
        data = self._load()
        try:
            return [self._from_record(record) for record in data.get("appointments", [])]
        except (KeyError, TypeError, ScheduleError) as exc:
            raise StoreError(f"Invalid appointment record in {self.path}: {exc}") from exc

    def list_day_offs(self) -> FrozenSet[str]:
        """Load the ``YYYY-MM-DD`` keys of all days off."""
        try:
            return frozenset(date_key(day) for day in self._load().get("day_offs", []))
        except ScheduleError as exc:
            raise StoreError(f"Invalid day off in {self.path}: {exc}") from exc

    def insert(self, appointment: Appointment) -> None:
        data = self._load()
        records = data.setdefault("appointments", [])
        if any(record.get("id") == appointment.id for record in records):
            raise StoreError(f"Appointment {appointment.id} already exists")
        records.append(self._to_record(appointment))
        self._save(data)
        logger.info("Inserted appointment %s on %s", appointment.id, appointment.date_key)

    def update(self, appointment: Appointment) -> None:
        data = self._load()
        records = data.setdefault("appointments", [])
        for index, record in enumerate(records):
            if record.get("id") == appointment.id:
                records[index] = self._to_record(appointment)
                self._save(data)
                logger.info("Updated appointment %s", appointment.id)
                return
        raise AppointmentNotFoundError(f"Appointment {appointment.id} not found")

    def delete(self, appointment_id: str) -> None:
        data = self._load()
        records = data.get("appointments", [])
        remaining = [record for record in records if record.get("id") != appointment_id]
        if len(remaining) == len(records):
            raise AppointmentNotFoundError(f"Appointment {appointment_id} not found")
        data["appointments"] = remaining
        self._save(data)
        logger.info("Deleted appointment %s", appointment_id)

    def replace_day_offs(self, day_offs: FrozenSet[str]) -> None:
        """Store the complete set of days off."""
        data = self._load()
        data["day_offs"] = sorted(day_offs)
        self._save(data)
        logger.info("Stored %d day(s) off", len(day_offs))

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            logger.debug("Data file %s does not exist yet, starting empty", self.path)
            return {"appointments": [], "day_offs": []}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Could not read {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StoreError(f"{self.path} must contain a JSON object at the root level.")

        return data

    def _save(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except OSError as exc:
            raise StoreError(f"Could not write {self.path}: {exc}") from exc

    @staticmethod
    def _to_record(appointment: Appointment) -> Dict[str, Any]:
        return {
            "id": appointment.id,
            "date": appointment.date_key,
            "start_time": appointment.start_time,
            "end_time": appointment.end_time,
            "duration": appointment.duration.value,
            "student": appointment.student,
            "subject": appointment.subject,
            "price": appointment.price,
            "comment": appointment.comment,
            "homework": appointment.homework,
            "studied": appointment.studied,
            "is_confirmed": appointment.is_confirmed,
            "is_completed": appointment.is_completed,
            "is_paid": appointment.is_paid,
        }

    @staticmethod
    def _from_record(record: Dict[str, Any]) -> Appointment:
        return Appointment(
            id=record["id"],
            date=record["date"],
            start_time=record["start_time"],
            end_time=record["end_time"],
            duration=record.get("duration", Duration.ONE_HOUR),
            student=record.get("student", ""),
            subject=record.get("subject", ""),
            price=record.get("price", 0),
            comment=record.get("comment", ""),
            homework=record.get("homework", ""),
            studied=record.get("studied", ""),
            is_confirmed=bool(record.get("is_confirmed", False)),
            is_completed=bool(record.get("is_completed", False)),
            is_paid=bool(record.get("is_paid", False)),
        )
