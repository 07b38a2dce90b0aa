"""Tests for derived field computation."""
import pytest
from datetime import date, datetime

from hr_workflow.models.timesheet import TimesheetEntry
from hr_workflow.services.aggregation import days_requested, total_hours, week_end_date


class TestTotalHours:
    """Tests for total_hours."""

    def test_sums_entry_models(self):
        """Test hours of entry models are summed."""
        entries = [
            TimesheetEntry(day="Monday", hours=8, project="ProjA"),
            TimesheetEntry(day="Tuesday", hours=6, project="ProjB"),
        ]

        assert total_hours(entries) == 14

    def test_sums_stored_documents(self):
        """Test hours of stored entry documents are summed."""
        entries = [
            {"day": "Monday", "hours": 7.5, "project": "ProjA"},
            {"day": "Monday", "hours": 0.5, "project": "ProjB"},
        ]

        assert total_hours(entries) == 8

    def test_empty_is_zero(self):
        """Test no entries means zero hours."""
        assert total_hours([]) == 0


class TestDaysRequested:
    """Tests for days_requested."""

    @pytest.mark.parametrize("from_date,to_date,expected", [
        (date(2024, 2, 1), date(2024, 2, 1), 1),
        (date(2024, 2, 1), date(2024, 2, 3), 3),
        (date(2024, 1, 1), date(2024, 1, 31), 31),
        (date(2024, 2, 28), date(2024, 3, 1), 3),  # leap year
    ])
    def test_inclusive_day_count(self, from_date, to_date, expected):
        """Test the span counts both end days."""
        assert days_requested(from_date, to_date) == expected

    def test_partial_day_rounds_up(self):
        """Test a time component still counts the touched day."""
        assert days_requested(datetime(2024, 2, 1), datetime(2024, 2, 2, 12)) == 3


class TestWeekEndDate:
    """Tests for week_end_date."""

    def test_six_days_after_start(self):
        """Test the week ends six days after it starts."""
        assert week_end_date(date(2024, 1, 1)) == date(2024, 1, 7)

    def test_crosses_month(self):
        """Test week bounds spanning a month boundary."""
        assert week_end_date(date(2024, 1, 29)) == date(2024, 2, 4)
