"""Tests for services/hours.py - day splitting and weekly aggregation."""

from datetime import date, time
from decimal import Decimal
from types import SimpleNamespace

import pytest

from timesheet_portal.services.hours import (
    WEEKDAYS,
    WorkWindow,
    aggregate_many,
    aggregate_week,
    compute_cost,
    normalize_daily_hours,
    split_day,
    to_minutes,
    to_storage,
    total_worked_hours,
    week_anchor,
)


class TestSplitDay:

    @pytest.mark.parametrize(
        "start,end",
        [
            (None, "17:00"),
            ("09:00", None),
            ("", ""),
            ("17:00", "09:00"),
            ("12:00", "12:00"),
            ("nonsense", "17:00"),
        ],
    )
    def test_missing_or_inverted_times_give_zero(self, start, end):
        assert split_day(start, end) == (0.0, 0.0)

    def test_exactly_the_window(self):
        assert split_day("08:00", "16:00") == (8.0, 0.0)

    def test_overtime_on_both_sides(self):
        assert split_day("06:00", "18:00") == (8.0, 4.0)

    def test_entirely_after_window(self):
        assert split_day("17:00", "19:00") == (0.0, 2.0)

    def test_nine_to_five(self):
        assert split_day("09:00", "17:00") == (7.0, 1.0)

    def test_accepts_time_objects(self):
        assert split_day(time(7, 30), time(16, 0)) == (8.0, 0.5)

    @pytest.mark.parametrize(
        "start,end",
        [("05:15", "23:45"), ("07:59", "08:01"), ("15:10", "16:20"), ("00:00", "08:00"), ("10:05", "13:50")],
    )
    def test_normal_plus_overtime_equals_elapsed(self, start, end):
        split = split_day(start, end)
        elapsed = (to_minutes(end) - to_minutes(start)) / 60
        assert split.normal_hours + split.overtime_hours == pytest.approx(elapsed)

    def test_results_are_not_rounded(self):
        split = split_day("08:00", "08:20")
        assert split.normal_hours == pytest.approx(1 / 3)
        assert split.normal_hours != 0.33

    def test_custom_window(self):
        nine_to_five = WorkWindow(9 * 60, 17 * 60)
        assert split_day("09:00", "17:00", nine_to_five) == (8.0, 0.0)


class TestAggregation:

    def test_week_of_nine_to_five(self):
        daily = {day: {"start": "09:00", "end": "17:00"} for day in WEEKDAYS[:5]}
        totals = aggregate_week(daily)
        assert totals.normal_hours == pytest.approx(35.0)
        assert totals.overtime_hours == pytest.approx(5.0)

    def test_weekend_is_all_overlap_rules_too(self):
        daily = {"saturday": {"start": "08:00", "end": "12:00"}}
        assert aggregate_week(daily) == (4.0, 0.0)

    def test_empty_week(self):
        assert aggregate_week({}) == (0.0, 0.0)
        assert aggregate_week(None) == (0.0, 0.0)

    def test_unknown_keys_are_ignored(self):
        daily = {"funday": {"start": "08:00", "end": "16:00"}}
        assert aggregate_week(daily) == (0.0, 0.0)

    def test_total_worked_hours(self):
        daily = {"monday": {"start": "06:00", "end": "18:00"}, "tuesday": {"start": "10:00", "end": ""}}
        assert total_worked_hours(daily) == pytest.approx(12.0)

    def test_compute_cost(self):
        assert compute_cost(35.0, Decimal("20.00"), 5.0, Decimal("30.00")) == Decimal("850.00")

    def test_compute_cost_with_missing_rates(self):
        assert compute_cost(10, None, 2, None) == Decimal("0")

    def test_aggregate_many_uses_stored_values(self):
        sheets = [
            SimpleNamespace(total_cost=Decimal("100.00"), normal_hours=Decimal("5.00"), overtime_hours=Decimal("0.00"),
                            daily_hours={"monday": {"start": "00:00", "end": "23:00"}}),
            SimpleNamespace(total_cost=Decimal("50.00"), normal_hours=Decimal("2.50"), overtime_hours=Decimal("1.25"),
                            daily_hours={}),
        ]
        totals = aggregate_many(sheets)
        assert totals.subtotal == Decimal("150.00")
        assert totals.normal_hours == Decimal("7.50")
        assert totals.overtime_hours == Decimal("1.25")


class TestHelpers:

    def test_week_anchor_is_monday(self):
        assert week_anchor(date(2024, 1, 17)) == date(2024, 1, 15)
        assert week_anchor(date(2024, 1, 21)) == date(2024, 1, 15)
        assert week_anchor(date(2024, 1, 15)) == date(2024, 1, 15)

    def test_normalize_fills_all_days_in_order(self):
        normalized = normalize_daily_hours({"friday": {"start": "08:00", "end": "12:00"}})
        assert list(normalized) == list(WEEKDAYS)
        assert normalized["monday"] == {"start": "", "end": "", "notes": ""}
        assert normalized["friday"]["start"] == "08:00"

    def test_to_storage_rounds_half_up(self):
        assert to_storage(1 / 3) == Decimal("0.33")
        assert to_storage(Decimal("2.675")) == Decimal("2.68")
        assert to_storage(None) == Decimal("0.00")

    def test_to_minutes(self):
        assert to_minutes("08:30") == 510
        assert to_minutes("24:00") == 1440
        assert to_minutes("25:00") is None
        assert to_minutes("8") is None
