"""
Reminder message composition.

Builds the display text shown in reminder lists and the title, body and
trigger time of push notifications. Two locales are supported: "it"
(default) and "en".
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from .car import Car
from .maintenance import Maintenance, MaintenanceType
from .reminder import Reminder, ReminderType

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "it"

TEMPLATES = {
    "it": {
        "date_format": "%d/%m/%Y",
        "date_due": "Scadenza {type}: {date}",
        "interval_overdue": "{type} scaduto il {date}",
        "interval_soon": "Prossimo {type} tra {days} giorni ({date})",
        "interval_later": "Prossimo {type}: {date}",
        "interval_unknown": "Prossimo {type} programmato",
        "mileage": "{type} a {km} km",
        "both_date": " entro {date}",
        "both_mileage": " o a {km} km",
        "calculated_soon": "{type} previsto tra {days} giorni",
        "calculated": "{type} previsto per il {date}",
        "notify_title": "Promemoria Manutenzione",
        "notify_advance": "Promemoria: {type} per {car} previsto tra {days} giorni ({date})",
        "notify_now": "È tempo di fare {type} per {car}",
        "notify_mileage": "{car} ha raggiunto i {km} km. È tempo di fare {type}",
        "notify_both": "Promemoria: {type} per {car} in scadenza tra {days} giorni",
        "notify_generic": "Promemoria manutenzione per {car}",
    },
    "en": {
        "date_format": "%Y-%m-%d",
        "date_due": "{type} due: {date}",
        "interval_overdue": "{type} overdue since {date}",
        "interval_soon": "Next {type} in {days} days ({date})",
        "interval_later": "Next {type}: {date}",
        "interval_unknown": "Next {type} scheduled",
        "mileage": "{type} at {km} km",
        "both_date": " by {date}",
        "both_mileage": " or at {km} km",
        "calculated_soon": "{type} expected in {days} days",
        "calculated": "{type} expected on {date}",
        "notify_title": "Maintenance reminder",
        "notify_advance": "Reminder: {type} for {car} due in {days} days ({date})",
        "notify_now": "Time to do {type} for {car}",
        "notify_mileage": "{car} has reached {km} km. Time to do {type}",
        "notify_both": "Reminder: {type} for {car} due in {days} days",
        "notify_generic": "Maintenance reminder for {car}",
    },
}

ENGLISH_TYPE_NAMES = {
    MaintenanceType.TAGLIANDO: "Service",
    MaintenanceType.REVISIONE: "Inspection",
    MaintenanceType.BOLLO: "Road tax",
    MaintenanceType.ASSICURAZIONE: "Insurance",
    MaintenanceType.GOMME: "Tire change",
}


@dataclass(frozen=True)
class Notification:
    """A push notification ready to hand to a dispatcher."""

    identifier: str
    title: str
    body: str
    trigger: datetime


def _templates(locale: str) -> dict:
    return TEMPLATES.get(locale, TEMPLATES[DEFAULT_LOCALE])


def format_date(value: date, locale: str = DEFAULT_LOCALE) -> str:
    return value.strftime(_templates(locale)["date_format"])


def type_label(maintenance: Maintenance, locale: str = DEFAULT_LOCALE) -> str:
    """Maintenance display name in the given locale."""
    if locale == "en":
        for key, name in ENGLISH_TYPE_NAMES.items():
            if key == maintenance.type:
                return name
    return maintenance.display_type


def notification_id(reminder: Reminder) -> str:
    """Stable notification identifier for a reminder."""
    return f"reminder_{reminder.id}"


def due_date(reminder: Reminder) -> Optional[date]:
    """Absolute due date usable for a timed notification, if any."""
    if reminder.type in (ReminderType.DATE, ReminderType.BOTH):
        return reminder.date
    if reminder.type == ReminderType.INTERVAL:
        return reminder.interval_due_date
    return None


def reminder_message(
    reminder: Reminder,
    maintenance: Maintenance,
    today: Optional[date] = None,
    locale: str = DEFAULT_LOCALE,
) -> str:
    """Text shown for an explicit reminder in the upcoming list."""
    today = today or date.today()
    t = _templates(locale)
    label = type_label(maintenance, locale)

    if reminder.type == ReminderType.DATE:
        if reminder.date:
            return t["date_due"].format(type=label, date=format_date(reminder.date, locale))
    elif reminder.type == ReminderType.INTERVAL:
        next_date = reminder.interval_due_date
        if next_date is None:
            return t["interval_unknown"].format(type=label)
        days = (next_date - today).days
        formatted = format_date(next_date, locale)
        if days <= 0:
            return t["interval_overdue"].format(type=label, date=formatted)
        if days <= 30:
            return t["interval_soon"].format(type=label, days=days, date=formatted)
        return t["interval_later"].format(type=label, date=formatted)
    elif reminder.type == ReminderType.MILEAGE:
        return t["mileage"].format(type=label, km=reminder.mileage)
    elif reminder.type == ReminderType.BOTH:
        message = label
        if reminder.date:
            message += t["both_date"].format(date=format_date(reminder.date, locale))
        if reminder.mileage > 0:
            message += t["both_mileage"].format(km=reminder.mileage)
        return message

    return label


def calculated_message(
    maintenance: Maintenance, predicted: date, days_until: int, locale: str = DEFAULT_LOCALE
) -> str:
    """Text shown for a predicted (history-based) maintenance."""
    t = _templates(locale)
    label = type_label(maintenance, locale)
    if 0 < days_until <= 7:
        return t["calculated_soon"].format(type=label, days=days_until)
    return t["calculated"].format(type=label, date=format_date(predicted, locale))


def notification_message(
    reminder: Reminder,
    maintenance: Maintenance,
    car: Car,
    advance_days: int,
    locale: str = DEFAULT_LOCALE,
) -> str:
    """Body of the push notification for an explicit reminder."""
    t = _templates(locale)
    label = type_label(maintenance, locale)
    car_name = car.display_name

    if reminder.type in (ReminderType.DATE, ReminderType.INTERVAL):
        due = due_date(reminder)
        if due is not None:
            if advance_days > 0:
                return t["notify_advance"].format(
                    type=label, car=car_name, days=advance_days, date=format_date(due, locale)
                )
            return t["notify_now"].format(type=label, car=car_name)
    elif reminder.type == ReminderType.MILEAGE:
        return t["notify_mileage"].format(car=car_name, km=reminder.mileage, type=label)
    elif reminder.type == ReminderType.BOTH:
        if advance_days > 0:
            return t["notify_both"].format(type=label, car=car_name, days=advance_days)
        return t["notify_now"].format(type=label, car=car_name)

    return t["notify_generic"].format(car=car_name)


def notification_trigger(
    reminder: Reminder,
    now: Optional[datetime] = None,
    advance_days: int = 7,
    hour: int = 10,
) -> Optional[datetime]:
    """
    When to fire the notification for a reminder.

    The trigger is `advance_days` before the due date at `hour`:00. MILEAGE
    reminders have no trigger (an odometer reading can't fire a timer), and
    triggers not strictly in the future are dropped.
    """
    now = now or datetime.now()
    due = due_date(reminder)
    if due is None:
        if reminder.type == ReminderType.MILEAGE:
            logger.debug("Mileage reminder %s has no timed trigger", reminder.id)
        return None

    trigger = datetime.combine(due - timedelta(days=advance_days), time(hour=hour))
    if trigger <= now:
        logger.info("Notification date already passed for reminder %s: %s", reminder.id, trigger)
        return None
    return trigger


def compose_notification(
    reminder: Reminder,
    maintenance: Maintenance,
    car: Car,
    now: Optional[datetime] = None,
    advance_days: int = 7,
    hour: int = 10,
    locale: str = DEFAULT_LOCALE,
) -> Optional[Notification]:
    """Full notification for a reminder, or None when it can't be scheduled."""
    trigger = notification_trigger(reminder, now, advance_days, hour)
    if trigger is None:
        return None
    return Notification(
        identifier=notification_id(reminder),
        title=_templates(locale)["notify_title"],
        body=notification_message(reminder, maintenance, car, advance_days, locale),
        trigger=trigger,
    )
