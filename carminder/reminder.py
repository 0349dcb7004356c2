"""Reminder class describing when a maintenance is next due."""

import logging
import uuid
from datetime import date
from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)


def plain_value(value):
    """Enum members are stored as their plain string value."""
    return value.value if isinstance(value, Enum) else value


class ReminderType(str, Enum):
    DATE = "date"
    INTERVAL = "interval"
    MILEAGE = "mileage"
    BOTH = "both"


class IntervalUnit(str, Enum):
    MONTHS = "months"
    YEARS = "years"


# Reminder offered by default when a maintenance of this type is recorded
DEFAULT_INTERVALS = {
    "revisione": (2, IntervalUnit.YEARS),
    "bollo": (1, IntervalUnit.YEARS),
    "tagliando": (1, IntervalUnit.YEARS),
    "assicurazione": (1, IntervalUnit.YEARS),
    "gomme": (6, IntervalUnit.MONTHS),
}


def add_interval(start: date, value: int, unit: Optional[str]) -> Optional[date]:
    """
    Add a calendar interval to a date.

    Month arithmetic clamps to the end of the month (Jan 31 + 1 month is the
    last day of February). Returns None for a non-positive value or an
    unknown unit.
    """
    if not value or value <= 0:
        return None
    if unit == IntervalUnit.MONTHS:
        return start + relativedelta(months=int(value))
    if unit == IntervalUnit.YEARS:
        return start + relativedelta(years=int(value))
    return None


class Reminder:
    """
    A reminder rule attached to one maintenance.

    Fields are interpreted by type: DATE uses `date`, MILEAGE uses
    `mileage` (0 = unset), BOTH uses both, INTERVAL uses `interval_value`
    and `interval_unit` relative to the maintenance date. INTERVAL
    reminders also keep the derived due date in `date`.
    """

    def __init__(
        self,
        type: str,
        date: Optional[date] = None,
        mileage: int = 0,
        interval_value: int = 0,
        interval_unit: Optional[str] = None,
        id: Optional[uuid.UUID] = None,
    ):
        self.id = id or uuid.uuid4()
        self.type = plain_value(type)
        self.date = date
        self.mileage = mileage
        self.interval_value = interval_value
        self.interval_unit = plain_value(interval_unit)
        self.maintenance = None

    @classmethod
    def on_date(cls, due: date) -> "Reminder":
        return cls(ReminderType.DATE.value, date=due)

    @classmethod
    def at_mileage(cls, mileage: int) -> "Reminder":
        return cls(ReminderType.MILEAGE.value, mileage=mileage)

    @classmethod
    def every(cls, value: int, unit: str) -> "Reminder":
        return cls(ReminderType.INTERVAL.value, interval_value=value, interval_unit=unit)

    @classmethod
    def date_or_mileage(cls, due: date, mileage: int) -> "Reminder":
        return cls(ReminderType.BOTH.value, date=due, mileage=mileage)

    @classmethod
    def default_for(cls, maintenance_type: str) -> Optional["Reminder"]:
        """Default interval reminder for a maintenance type, if it has one."""
        if maintenance_type not in DEFAULT_INTERVALS:
            return None
        value, unit = DEFAULT_INTERVALS[maintenance_type]
        return cls.every(value, unit.value)

    @property
    def interval_due_date(self) -> Optional[date]:
        """Due date derived from the owning maintenance date and the interval."""
        if self.maintenance is None or self.maintenance.date is None:
            return None
        return add_interval(self.maintenance.date, self.interval_value, self.interval_unit)

    def refresh_derived_date(self) -> None:
        """Recompute the stored date of an INTERVAL reminder from its parameters."""
        if self.type != ReminderType.INTERVAL:
            return
        derived = self.interval_due_date
        if derived is None:
            logger.debug("Cannot derive due date for interval reminder %s", self.id)
        self.date = derived

    @property
    def formatted_text(self) -> str:
        """Short description of the rule (e.g. 'Ogni 2 anni', 'A 120000 km')."""
        text = ""
        if self.type == ReminderType.DATE:
            if self.date:
                text = f"Scadenza: {self.date.strftime('%d/%m/%Y')}"
        elif self.type == ReminderType.INTERVAL:
            if self.interval_value and self.interval_value > 0 and self.interval_unit:
                unit_text = "mesi" if self.interval_unit == IntervalUnit.MONTHS else "anni"
                text = f"Ogni {self.interval_value} {unit_text}"
        elif self.type == ReminderType.MILEAGE:
            if self.mileage > 0:
                text = f"A {self.mileage} km"
        elif self.type == ReminderType.BOTH:
            if self.date:
                text = f"Scadenza: {self.date.strftime('%d/%m/%Y')}"
            if self.mileage > 0:
                text += " o " if text else ""
                text += f"a {self.mileage} km"
        else:
            text = "Promemoria impostato"
        return text
