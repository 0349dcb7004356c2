"""Next-maintenance estimation from a car's service history."""

import logging
from datetime import date, timedelta
from typing import Optional

from .car import Car
from .calculations import days_between
from .maintenance import Maintenance, MaintenanceType
from .messages import DEFAULT_LOCALE, calculated_message
from .reminder import Reminder, ReminderType
from .reminder_event import ReminderEvent, Synthetic

logger = logging.getLogger(__name__)

YEAR = timedelta(days=365)

STANDARD_INTERVALS = {
    MaintenanceType.TAGLIANDO: YEAR,
    MaintenanceType.REVISIONE: 2 * YEAR,
    MaintenanceType.BOLLO: YEAR,
    MaintenanceType.ASSICURAZIONE: YEAR,
    MaintenanceType.GOMME: YEAR / 2,
}

# Predictions further overdue than this are not resurrected
MAX_OVERDUE_DAYS = 30


def standard_interval(maintenance_type: str) -> timedelta:
    """Typical interval for a maintenance type; one year when unknown."""
    for key, interval in STANDARD_INTERVALS.items():
        if key == maintenance_type:
            return interval
    return YEAR


def average_interval(dates) -> timedelta:
    """Mean gap between consecutive dates (ascending). Zero for fewer than two."""
    if len(dates) < 2:
        return timedelta(0)
    total = sum(
        (current - previous for previous, current in zip(dates, dates[1:])),
        timedelta(0),
    )
    return total / (len(dates) - 1)


def predict_next_date(car: Car, maintenance_type: str) -> Optional[date]:
    """
    Predict the next date of a maintenance type from the car's history.

    Uses the average gap between past services of the type, or the standard
    interval with a single record. None when the type was never performed.
    """
    history = sorted(
        (m for m in car.maintenances if m.type == maintenance_type),
        key=lambda m: m.date or date.min,
    )
    if not history or history[-1].date is None:
        return None

    dates = [m.date for m in history if m.date is not None]
    interval = average_interval(dates)
    if interval <= timedelta(0):
        interval = standard_interval(maintenance_type)

    return history[-1].date + interval


def estimate_next(
    car: Car,
    maintenance_type: str,
    horizon_days: int = 365,
    today: Optional[date] = None,
    locale: str = DEFAULT_LOCALE,
) -> Optional[ReminderEvent]:
    """
    Build a synthetic reminder event for the next maintenance of a type.

    Returns None when there is no history or the prediction falls outside
    (-MAX_OVERDUE_DAYS, horizon_days].
    """
    today = today or date.today()
    predicted = predict_next_date(car, maintenance_type)
    if predicted is None:
        return None

    days_until = days_between(today, predicted)
    if not (-MAX_OVERDUE_DAYS < days_until <= horizon_days):
        logger.debug(
            "Prediction for %s on %s out of window (%d days)",
            maintenance_type,
            predicted,
            days_until,
        )
        return None

    reminder = Reminder(ReminderType.DATE.value, date=predicted)
    maintenance = Maintenance(maintenance_type, predicted, mileage=0, cost=0.0)
    return ReminderEvent(
        source=Synthetic(predicted),
        reminder=reminder,
        maintenance=maintenance,
        car=car,
        days_until_due=days_until,
        is_due=days_until <= 0,
        message=calculated_message(maintenance, predicted, days_until, locale),
    )
