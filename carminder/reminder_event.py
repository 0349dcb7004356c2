"""ReminderEvent dataclass for computed reminder status."""

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Optional, TYPE_CHECKING, Union

from .urgency import Urgency

if TYPE_CHECKING:
    from .car import Car
    from .maintenance import Maintenance
    from .reminder import Reminder


@dataclass(frozen=True)
class Persisted:
    """Event backed by a reminder stored in the garage."""

    reminder_id: uuid.UUID


@dataclass(frozen=True)
class Synthetic:
    """Event predicted from maintenance history; never stored."""

    predicted_date: date


ReminderSource = Union[Persisted, Synthetic]


@dataclass
class ReminderEvent:
    """An upcoming or overdue maintenance event for a car."""

    source: ReminderSource
    reminder: "Reminder"
    maintenance: "Maintenance"
    car: "Car"
    days_until_due: Optional[int]
    is_due: bool
    message: str

    @property
    def is_calculated(self) -> bool:
        return isinstance(self.source, Synthetic)

    @property
    def maintenance_type(self) -> Optional[str]:
        return self.maintenance.type

    @property
    def urgency(self) -> Urgency:
        return Urgency.from_days(self.is_due, self.days_until_due)

    @property
    def sort_key(self):
        """Due events first, then by days until due; unknown days last."""
        days = self.days_until_due
        return (not self.is_due, days is None, days if days is not None else 0)
