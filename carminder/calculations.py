"""Due-status calculations for a single reminder."""

import logging
from datetime import date
from typing import Optional

from .car import Car
from .reminder import Reminder, ReminderType

logger = logging.getLogger(__name__)

# Assumed average daily usage, used to turn remaining km into days
KM_PER_DAY = 50


def days_between(start: date, end: date) -> int:
    """Calendar-day difference, negative when end is before start."""
    return (end - start).days


def calc_mileage_days(
    due_mileage: int, current_mileage: int, km_per_day: int = KM_PER_DAY
) -> Optional[int]:
    """
    Estimate days until a mileage threshold is reached.

    None when no threshold is set (0); 0 when already reached.
    """
    if not due_mileage or due_mileage <= 0:
        return None
    if due_mileage > current_mileage:
        return (due_mileage - current_mileage) // km_per_day
    return 0


def interval_due_date(reminder: Reminder) -> Optional[date]:
    """Next due date of an INTERVAL reminder, or None (logged) if not evaluable."""
    due = reminder.interval_due_date
    if due is None:
        maintenance_date = reminder.maintenance.date if reminder.maintenance else None
        logger.warning(
            "Missing data for interval reminder %s: value=%s unit=%s maintenance_date=%s",
            reminder.id,
            reminder.interval_value,
            reminder.interval_unit,
            maintenance_date,
        )
    return due


def days_until_due(
    reminder: Reminder,
    car: Car,
    today: Optional[date] = None,
    km_per_day: int = KM_PER_DAY,
) -> Optional[int]:
    """
    Days until the reminder is due; negative when overdue, None when unknown.

    - DATE: days from today to reminder.date
    - INTERVAL: days from today to maintenance date + interval
    - MILEAGE: remaining km / km_per_day, 0 once reached
    - BOTH: the smaller of the date and mileage figures that resolve
    """
    today = today or date.today()

    if reminder.type == ReminderType.DATE:
        if reminder.date is None:
            return None
        return days_between(today, reminder.date)

    if reminder.type == ReminderType.INTERVAL:
        due = interval_due_date(reminder)
        if due is None:
            return None
        days = days_between(today, due)
        logger.debug(
            "Interval reminder %s: every %s %s from %s, due %s (%d days)",
            reminder.id,
            reminder.interval_value,
            reminder.interval_unit,
            reminder.maintenance.date,
            due,
            days,
        )
        return days

    if reminder.type == ReminderType.MILEAGE:
        return calc_mileage_days(reminder.mileage, car.mileage, km_per_day)

    if reminder.type == ReminderType.BOTH:
        candidates = []
        if reminder.date is not None:
            candidates.append(days_between(today, reminder.date))
        mileage_days = calc_mileage_days(reminder.mileage, car.mileage, km_per_day)
        if mileage_days is not None:
            candidates.append(mileage_days)
        return min(candidates) if candidates else None

    return None


def is_mileage_due(due_mileage: int, current_mileage: int) -> bool:
    if not due_mileage or due_mileage <= 0:
        return False
    return current_mileage >= due_mileage


def is_due(reminder: Reminder, car: Car, today: Optional[date] = None) -> bool:
    """Whether the reminder is due now. BOTH is due when either part is due."""
    today = today or date.today()

    if reminder.type == ReminderType.DATE:
        return reminder.date is not None and reminder.date <= today

    if reminder.type == ReminderType.INTERVAL:
        days = days_until_due(reminder, car, today)
        return days is not None and days <= 0

    if reminder.type == ReminderType.MILEAGE:
        return is_mileage_due(reminder.mileage, car.mileage)

    if reminder.type == ReminderType.BOTH:
        date_due = reminder.date is not None and reminder.date <= today
        return date_due or is_mileage_due(reminder.mileage, car.mileage)

    return False
