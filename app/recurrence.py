"""Next-occurrence arithmetic for recurring expenses.

Month steps clamp to the last day of the target month, so Jan 31 + monthly
is Feb 28 (or 29) and Feb 29 + yearly is Feb 28.
"""

import calendar
from datetime import date as date_type, timedelta

from app.models import Frequency, RecurringSchedule

DAY_STEPS = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.BIWEEKLY: 14,
}

MONTH_STEPS = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.YEARLY: 12,
}


def add_months(value, months: int):
    """Shift a date or datetime by whole months, clamping the day."""
    index = value.month - 1 + months
    year = value.year + index // 12
    month = index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def next_occurrence(current, frequency: Frequency | str):
    """Return the occurrence after ``current``; keeps the date/datetime type."""
    frequency = Frequency(frequency)
    if frequency in DAY_STEPS:
        return current + timedelta(days=DAY_STEPS[frequency])
    return add_months(current, MONTH_STEPS[frequency])


def upcoming_occurrences(
    start,
    frequency: Frequency | str,
    count: int,
    end_date: date_type | None = None,
) -> list:
    """The next ``count`` occurrences after ``start``, stopping at ``end_date``.

    Each step is taken from the previous occurrence, so a monthly series that
    starts on the 31st drifts to the 28th after February.
    """
    result = []
    current = start
    for _ in range(count):
        current = next_occurrence(current, frequency)
        if end_date is not None and _as_date(current) > end_date:
            break
        result.append(current)
    return result


def is_due(schedule: RecurringSchedule, today: date_type) -> bool:
    if not schedule.is_active:
        return False
    if schedule.end_date is not None and schedule.end_date < today:
        return False
    return schedule.next_occurrence <= today


def _as_date(value) -> date_type:
    # datetime is a date subclass
    return value.date() if hasattr(value, "hour") else value
