"""
Adapters layer - File storage and report export.
"""

from .json_store import JsonAppointmentStore
from .report import build_report_rows, default_report_name, write_report_csv

__all__ = ["JsonAppointmentStore", "build_report_rows", "default_report_name", "write_report_csv"]
