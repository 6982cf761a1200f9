"""
Hour splitting and aggregation for weekly timesheets.

Every day is split against a fixed normal working window: minutes inside the
window are normal hours, everything else worked that day is overtime. The
window defaults to 08:00-16:00 and is read from WORK_WINDOW_START /
WORK_WINDOW_END.

Hours come back as unrounded floats; rounding to 2dp happens only when a
value is persisted (see to_storage).
"""

import os
import logging
from datetime import date, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

TimeLike = Union[str, time, None]


class DaySplit(NamedTuple):
    normal_hours: float
    overtime_hours: float


class WeekTotals(NamedTuple):
    normal_hours: float
    overtime_hours: float


class InvoiceTotals(NamedTuple):
    subtotal: Decimal
    normal_hours: Decimal
    overtime_hours: Decimal


class WorkWindow(NamedTuple):
    start_minute: int
    end_minute: int


# ──────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────

def to_minutes(value: TimeLike) -> Optional[int]:
    """Minutes since midnight for "HH:MM" or a time; None when blank/invalid."""
    if value is None:
        return None
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    value = str(value).strip()
    if not value:
        return None
    try:
        hours, minutes = value.split(":")[:2]
        h, m = int(hours), int(minutes)
    except ValueError:
        return None
    if not (0 <= h <= 24 and 0 <= m < 60) or (h == 24 and m != 0):
        return None
    return h * 60 + m


def _window_from_env() -> WorkWindow:
    start = to_minutes(os.getenv("WORK_WINDOW_START", "08:00"))
    end = to_minutes(os.getenv("WORK_WINDOW_END", "16:00"))
    if start is None or end is None or end <= start:
        logger.warning("Invalid WORK_WINDOW_START/END, falling back to 08:00-16:00")
        return WorkWindow(8 * 60, 16 * 60)
    return WorkWindow(start, end)


NORMAL_WINDOW = _window_from_env()


def to_storage(value) -> Decimal:
    """Round an hours/money value to 2dp for a Numeric(10, 2) column."""
    return Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def week_anchor(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def normalize_daily_hours(daily_hours: Optional[dict]) -> dict:
    """Return all seven weekdays in order, filling gaps with empty entries."""
    daily_hours = daily_hours or {}
    normalized = {}
    for day in WEEKDAYS:
        entry = daily_hours.get(day) or {}
        normalized[day] = {
            "start": entry.get("start") or "",
            "end": entry.get("end") or "",
            "notes": entry.get("notes") or "",
        }
    return normalized


# ──────────────────────────────────────────────
# Splitting / aggregation
# ──────────────────────────────────────────────

def split_day(start: TimeLike, end: TimeLike, window: Optional[WorkWindow] = None) -> DaySplit:
    window = window or NORMAL_WINDOW
    start_min = to_minutes(start)
    end_min = to_minutes(end)
    if start_min is None or end_min is None or end_min <= start_min:
        return DaySplit(0.0, 0.0)

    normal_minutes = max(0, min(end_min, window.end_minute) - max(start_min, window.start_minute))
    total_minutes = end_min - start_min
    overtime_minutes = total_minutes - normal_minutes
    return DaySplit(normal_minutes / 60, overtime_minutes / 60)


def aggregate_week(daily_hours: Optional[dict], window: Optional[WorkWindow] = None) -> WeekTotals:
    daily_hours = daily_hours or {}
    normal = 0.0
    overtime = 0.0
    for day in WEEKDAYS:
        entry = daily_hours.get(day) or {}
        split = split_day(entry.get("start"), entry.get("end"), window)
        normal += split.normal_hours
        overtime += split.overtime_hours
    return WeekTotals(normal, overtime)


def total_worked_hours(daily_hours: Optional[dict]) -> float:
    """Sum of (end - start) across the week, ignoring the work window."""
    daily_hours = daily_hours or {}
    total_minutes = 0
    for day in WEEKDAYS:
        entry = daily_hours.get(day) or {}
        start_min = to_minutes(entry.get("start"))
        end_min = to_minutes(entry.get("end"))
        if start_min is not None and end_min is not None and end_min > start_min:
            total_minutes += end_min - start_min
    return total_minutes / 60


def compute_cost(normal_hours, normal_rate, overtime_hours, overtime_rate) -> Decimal:
    return (
        Decimal(str(normal_hours or 0)) * Decimal(str(normal_rate or 0))
        + Decimal(str(overtime_hours or 0)) * Decimal(str(overtime_rate or 0))
    )


def aggregate_many(timesheets: Iterable) -> InvoiceTotals:
    """Sum the stored (snapshotted) cost and hours of several timesheets."""
    subtotal = Decimal("0")
    normal = Decimal("0")
    overtime = Decimal("0")
    for ts in timesheets:
        subtotal += Decimal(str(ts.total_cost or 0))
        normal += Decimal(str(ts.normal_hours or 0))
        overtime += Decimal(str(ts.overtime_hours or 0))
    return InvoiceTotals(subtotal, normal, overtime)
