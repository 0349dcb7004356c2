"""
Car maintenance reminder scheduling.

This package tracks cars, their maintenance history and reminders, and
computes which maintenance is upcoming or overdue:
- Car, Maintenance, Reminder, Document: Garage records
- Garage: Aggregate with create/read/update/delete operations
- days_until_due / is_due: Status of a single reminder
- estimate_next: Prediction from maintenance history
- upcoming_reminders: Ranked list of ReminderEvent for a car
- NotificationScheduler: Push notifications for explicit reminders
"""

from .urgency import Urgency
from .car import Car, CarStatus
from .maintenance import Maintenance, MaintenanceType
from .reminder import Reminder, ReminderType, IntervalUnit, add_interval
from .document import Document
from .reminder_event import ReminderEvent, Persisted, Synthetic
from .calculations import days_until_due, is_due, calc_mileage_days
from .estimator import estimate_next, predict_next_date, standard_interval
from .schedule import upcoming_reminders, sort_by_urgency
from .messages import Notification, compose_notification, notification_id
from .notifications import (
    NotificationDispatcher,
    InMemoryDispatcher,
    OutboxDispatcher,
    NotificationScheduler,
)
from .config import Settings
from .garage import Garage
from .loader import load_garage, save_garage, create_garage

__all__ = [
    "Urgency",
    "Car",
    "CarStatus",
    "Maintenance",
    "MaintenanceType",
    "Reminder",
    "ReminderType",
    "IntervalUnit",
    "add_interval",
    "Document",
    "ReminderEvent",
    "Persisted",
    "Synthetic",
    "days_until_due",
    "is_due",
    "calc_mileage_days",
    "estimate_next",
    "predict_next_date",
    "standard_interval",
    "upcoming_reminders",
    "sort_by_urgency",
    "Notification",
    "compose_notification",
    "notification_id",
    "NotificationDispatcher",
    "InMemoryDispatcher",
    "OutboxDispatcher",
    "NotificationScheduler",
    "Settings",
    "Garage",
    "load_garage",
    "save_garage",
    "create_garage",
]
