"""
Notification scheduling for explicit reminders.

Dispatchers deliver local notifications on behalf of the host platform.
Scheduling is idempotent per identifier: scheduling an identifier again
replaces the pending notification. Dispatch failures are logged and never
propagated.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Union

import yaml

from .car import Car
from .config import Settings
from .maintenance import Maintenance
from .messages import Notification, compose_notification, notification_id
from .reminder import Reminder

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    """Platform service that delivers local notifications."""

    def schedule(self, identifier: str, title: str, body: str, trigger: datetime) -> None:
        ...

    def cancel(self, identifier: str) -> None:
        ...


class InMemoryDispatcher:
    """Keeps pending notifications in a dict keyed by identifier."""

    def __init__(self):
        self.pending: Dict[str, Notification] = {}

    def schedule(self, identifier: str, title: str, body: str, trigger: datetime) -> None:
        self.pending[identifier] = Notification(identifier, title, body, trigger)

    def cancel(self, identifier: str) -> None:
        self.pending.pop(identifier, None)


class OutboxDispatcher:
    """
    Writes pending notifications to a YAML outbox file.

    The host platform reads the outbox and fires each notification at its
    trigger time.
    """

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)

    def _load(self) -> Dict[str, dict]:
        if not self.filename.exists():
            return {}
        with open(self.filename, "r") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
        return {entry["identifier"]: entry for entry in data.get("pending") or []}

    def _save(self, pending: Dict[str, dict]) -> None:
        entries = sorted(pending.values(), key=lambda e: (e["trigger"], e["identifier"]))
        with open(self.filename, "w") as fp:
            yaml.dump(
                {"pending": entries},
                fp,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=120,
            )

    def pending(self) -> List[Notification]:
        return [
            Notification(
                e["identifier"], e["title"], e["body"], datetime.fromisoformat(e["trigger"])
            )
            for e in self._load().values()
        ]

    def schedule(self, identifier: str, title: str, body: str, trigger: datetime) -> None:
        pending = self._load()
        pending[identifier] = {
            "identifier": identifier,
            "title": title,
            "body": body,
            "trigger": trigger.isoformat(timespec="minutes"),
        }
        self._save(pending)

    def cancel(self, identifier: str) -> None:
        pending = self._load()
        if pending.pop(identifier, None) is not None:
            self._save(pending)


class NotificationScheduler:
    """Schedules and cancels reminder notifications through a dispatcher."""

    def __init__(self, dispatcher: NotificationDispatcher, settings: Optional[Settings] = None):
        self.dispatcher = dispatcher
        self.settings = settings or Settings()

    def schedule_reminder(
        self,
        reminder: Reminder,
        maintenance: Maintenance,
        car: Car,
        now: Optional[datetime] = None,
    ) -> Optional[Notification]:
        """
        Schedule the notification for one reminder.

        Returns the scheduled notification, or None when the reminder has no
        future trigger or the dispatcher failed.
        """
        notification = compose_notification(
            reminder,
            maintenance,
            car,
            now=now,
            advance_days=self.settings.advance_days,
            hour=self.settings.notification_hour,
            locale=self.settings.locale,
        )
        if notification is None:
            logger.info("No trigger for %s reminder %s", reminder.type, reminder.id)
            return None

        try:
            self.dispatcher.schedule(
                notification.identifier,
                notification.title,
                notification.body,
                notification.trigger,
            )
        except Exception:
            logger.exception("Failed to schedule notification %s", notification.identifier)
            return None

        logger.info(
            "Scheduled notification %s for %s (%d days ahead)",
            notification.identifier,
            notification.trigger,
            self.settings.advance_days,
        )
        return notification

    def remove_reminder(self, reminder: Reminder) -> None:
        identifier = notification_id(reminder)
        try:
            self.dispatcher.cancel(identifier)
        except Exception:
            logger.exception("Failed to cancel notification %s", identifier)
            return
        logger.info("Removed notification %s", identifier)

    def remove_all(self, car: Car) -> None:
        """Cancel the notifications of every reminder of a car."""
        for maintenance in car.maintenance_array:
            if maintenance.reminder is not None:
                self.remove_reminder(maintenance.reminder)

    def resync(self, car: Car, now: Optional[datetime] = None) -> List[Notification]:
        """Cancel all notifications of a car, then schedule them again."""
        self.remove_all(car)
        scheduled = []
        for maintenance in car.maintenance_array:
            if maintenance.reminder is None:
                continue
            notification = self.schedule_reminder(maintenance.reminder, maintenance, car, now)
            if notification is not None:
                scheduled.append(notification)
        return scheduled

    def on_change(self, car: Car, removed: Iterable[Reminder] = ()) -> List[Notification]:
        """Garage change callback: drop removed reminders, then resync the car."""
        for reminder in removed:
            self.remove_reminder(reminder)
        return self.resync(car)
