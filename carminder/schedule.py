"""Upcoming reminder aggregation for a car."""

import logging
from datetime import date
from typing import List, Optional

from .car import Car
from .calculations import KM_PER_DAY, days_until_due, is_due
from .estimator import estimate_next
from .messages import DEFAULT_LOCALE, reminder_message
from .reminder_event import Persisted, ReminderEvent

logger = logging.getLogger(__name__)

# Overdue explicit reminders stay visible for this many days
OVERDUE_WINDOW_DAYS = 90


def explicit_reminders(
    car: Car,
    horizon_days: int = 365,
    today: Optional[date] = None,
    km_per_day: int = KM_PER_DAY,
    locale: str = DEFAULT_LOCALE,
) -> List[ReminderEvent]:
    """
    Events for every maintenance carrying a reminder.

    Included when due, within the horizon, or less than
    OVERDUE_WINDOW_DAYS overdue. A reminder that resolves neither a day
    count nor a due status carries no information and is skipped.
    """
    today = today or date.today()
    events = []
    for maintenance in car.maintenance_array:
        reminder = maintenance.reminder
        if reminder is None:
            continue

        days = days_until_due(reminder, car, today, km_per_day)
        due = is_due(reminder, car, today)
        if days is None and not due:
            logger.warning(
                "Skipping unresolvable %s reminder %s for %s",
                reminder.type,
                reminder.id,
                maintenance.display_type,
            )
            continue

        if due or (days is not None and (days <= horizon_days or days > -OVERDUE_WINDOW_DAYS)):
            events.append(
                ReminderEvent(
                    source=Persisted(reminder.id),
                    reminder=reminder,
                    maintenance=maintenance,
                    car=car,
                    days_until_due=days,
                    is_due=due,
                    message=reminder_message(reminder, maintenance, today, locale),
                )
            )
            logger.debug("Added explicit reminder: %s, days: %s", maintenance.display_type, days)
    return events


def sort_by_urgency(events: List[ReminderEvent]) -> List[ReminderEvent]:
    """Due events first, then ascending days until due; unknown days last."""
    return sorted(events, key=lambda e: e.sort_key)


def upcoming_reminders(
    car: Car,
    horizon_days: int = 365,
    today: Optional[date] = None,
    km_per_day: int = KM_PER_DAY,
    locale: str = DEFAULT_LOCALE,
) -> List[ReminderEvent]:
    """
    All upcoming and overdue maintenance events for a car, most urgent first.

    Logic:
    - Every explicit reminder (see explicit_reminders)
    - For each maintenance type the car has history for, but no explicit
      reminder event covering it, one predicted event from the estimator
    - Sorted by urgency
    """
    today = today or date.today()
    events = explicit_reminders(car, horizon_days, today, km_per_day, locale)

    performed = {m.type for m in car.maintenances if m.type}
    covered = {e.maintenance_type for e in events}
    for maintenance_type in sorted(performed - covered):
        event = estimate_next(car, maintenance_type, horizon_days, today, locale)
        if event is not None:
            events.append(event)

    logger.debug("Found %d reminders for %s", len(events), car.display_name)
    return sort_by_urgency(events)
