"""
Tests for the slot grid and date helpers.
"""

from datetime import date, datetime

import pendulum
import pytest

from tutorschedule.domain.exceptions import FormatError
from tutorschedule.domain.timegrid import (
    DayWindow,
    as_date,
    date_key,
    generate_time_grid,
    is_weekend,
    week_dates,
    week_start,
)


class TestDayWindow:
    """Tests for DayWindow."""

    def test_default_labels(self):
        """Test that the default grid runs from 08:00 through 22:00."""
        labels = DayWindow().time_labels()

        assert labels[0] == "08:00"
        assert labels[1] == "08:30"
        assert labels[-1] == "22:00"
        assert "22:30" not in labels
        assert len(labels) == 29

    def test_custom_window(self):
        """Test a shorter window with hourly slots."""
        labels = DayWindow(start_hour=9, end_hour=12, interval_minutes=60).time_labels()

        assert labels == ["09:00", "10:00", "11:00", "12:00"]

    def test_invalid_window_raises(self):
        """Test that a window must open before it closes."""
        with pytest.raises(ValueError):
            DayWindow(start_hour=22, end_hour=8)

        with pytest.raises(ValueError):
            DayWindow(interval_minutes=25)

    def test_alignment(self):
        """Test slot boundary detection."""
        window = DayWindow()

        assert window.is_aligned("08:00")
        assert window.is_aligned("22:00")
        assert not window.is_aligned("10:15")
        assert not window.is_aligned("07:30")
        assert not window.is_aligned("22:30")

    def test_contains(self):
        """Test that a lesson must start and end within the window."""
        window = DayWindow()

        assert window.contains("21:00", "22:00")
        assert not window.contains("21:30", "22:30")
        assert not window.contains("10:00", "10:00")


class TestGenerateTimeGrid:
    """Tests for generate_time_grid."""

    def test_cells_carry_date(self):
        """Test that every cell belongs to the requested day."""
        cells = generate_time_grid("2024-06-03")

        assert all(cell.date == pendulum.date(2024, 6, 3) for cell in cells)
        assert [cell.time for cell in cells] == DayWindow().time_labels()

    def test_same_grid_every_day(self):
        """Test that the grid does not depend on the day."""
        monday = [cell.time for cell in generate_time_grid("2024-06-03")]
        sunday = [cell.time for cell in generate_time_grid("2024-06-09")]

        assert monday == sunday


class TestDates:
    """Tests for date helpers and week resolution."""

    def test_as_date_accepts_several_types(self):
        """Test normalisation of strings, dates and datetimes."""
        expected = pendulum.date(2024, 6, 3)

        assert as_date("2024-06-03") == expected
        assert as_date(date(2024, 6, 3)) == expected
        assert as_date(datetime(2024, 6, 3, 15, 30)) == expected
        assert as_date(pendulum.parse("2024-06-03 10:00", tz="Europe/Moscow")) == expected

    def test_invalid_date_raises(self):
        """Test that malformed dates are format errors."""
        with pytest.raises(FormatError):
            as_date("03.06.2024")

        with pytest.raises(FormatError):
            as_date("2024-02-30")

    def test_date_key(self):
        """Test the canonical key format."""
        assert date_key(date(2024, 6, 3)) == "2024-06-03"

    def test_week_of_midweek_day(self):
        """Test that a Wednesday resolves to its Monday-start week."""
        days = week_dates("2024-06-05")

        assert days[0] == pendulum.date(2024, 6, 3)
        assert days[-1] == pendulum.date(2024, 6, 9)
        assert len(days) == 7

    def test_monday_starts_its_own_week(self):
        """Test that a Monday anchor is the week start."""
        assert week_start("2024-06-03") == pendulum.date(2024, 6, 3)

    def test_sunday_belongs_to_previous_monday(self):
        """Test that a Sunday maps to the Monday six days earlier."""
        assert week_start("2024-06-09") == pendulum.date(2024, 6, 3)

    def test_week_across_month_boundary(self):
        """Test week resolution spanning two months."""
        days = week_dates("2024-07-01")

        assert days[0] == pendulum.date(2024, 7, 1)
        assert week_start("2024-06-30") == pendulum.date(2024, 6, 24)

    def test_is_weekend(self):
        """Test Saturday and Sunday detection."""
        assert is_weekend("2024-06-08")
        assert is_weekend("2024-06-09")
        assert not is_weekend("2024-06-07")
