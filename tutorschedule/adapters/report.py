"""
Tabular lesson report for a date range, written as CSV.
"""

import csv
import logging
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List

from ..domain.intervals import to_minutes
from ..domain.models import Appointment
from ..domain.timegrid import date_key

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "Дата занятия",
    "Ученик",
    "Предмет",
    "Длительность",
    "Стоимость",
    "Домашнее задание",
    "Изучено на занятии",
    "Статус",
]


def build_report_rows(
    appointments: Iterable[Appointment],
    start: "date | str",
    end: "date | str",
) -> List[Dict[str, str]]:
    """
    Rows for every lesson between ``start`` and ``end`` (both inclusive).

    The status column uses the same classification as the grid.
    """
    start_key = date_key(start)
    end_key = date_key(end)

    selected = sorted(
        (appointment for appointment in appointments if start_key <= appointment.date_key <= end_key),
        key=lambda appointment: (appointment.date_key, to_minutes(appointment.start_time)),
    )

    return [
        {
            "Дата занятия": appointment.date.format("DD.MM.YYYY"),
            "Ученик": appointment.student,
            "Предмет": appointment.subject,
            "Длительность": appointment.duration.value,
            "Стоимость": f"{appointment.price:g}",
            "Домашнее задание": appointment.homework,
            "Изучено на занятии": appointment.studied,
            "Статус": appointment.status.label,
        }
        for appointment in selected
    ]


def default_report_name(start: "date | str", end: "date | str") -> str:
    return f"Расписание_{date_key(start)}_{date_key(end)}.csv"


def write_report_csv(rows: List[Dict[str, str]], path: Path) -> Path:
    """Write report rows with a header line and return the path written."""
    path = Path(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=REPORT_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)

    logger.info("Wrote %d report row(s) to %s", len(rows), path)
    return path
