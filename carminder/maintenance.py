"""Maintenance class for service records."""

import uuid
from datetime import date
from enum import Enum
from typing import Optional

from .reminder import plain_value


class MaintenanceType(str, Enum):
    TAGLIANDO = "tagliando"
    REVISIONE = "revisione"
    BOLLO = "bollo"
    ASSICURAZIONE = "assicurazione"
    GOMME = "gomme"
    CUSTOM = "custom"


DISPLAY_NAMES = {
    MaintenanceType.TAGLIANDO: "Tagliando",
    MaintenanceType.REVISIONE: "Revisione",
    MaintenanceType.BOLLO: "Bollo",
    MaintenanceType.ASSICURAZIONE: "Assicurazione",
    MaintenanceType.GOMME: "Cambio gomme",
}


class Maintenance:
    """A maintenance intervention performed on a car."""

    def __init__(
        self,
        type: str,
        date: Optional[date],
        mileage: int = 0,
        cost: float = 0.0,
        notes: Optional[str] = None,
        custom_type: Optional[str] = None,
        reminder: Optional["Reminder"] = None,  # noqa: F821
        id: Optional[uuid.UUID] = None,
    ):
        if cost < 0:
            raise ValueError(f"Maintenance cost must be non-negative, got {cost}")
        self.id = id or uuid.uuid4()
        self.type = plain_value(type)
        self.custom_type = custom_type if type == MaintenanceType.CUSTOM else None
        self.date = date
        self.mileage = mileage
        self.cost = cost
        self.notes = notes
        self.reminder = None
        if reminder is not None:
            self.attach_reminder(reminder)

    @property
    def display_type(self) -> str:
        if self.type == MaintenanceType.CUSTOM:
            return self.custom_type or "Personalizzato"
        for key, name in DISPLAY_NAMES.items():
            if key == self.type:
                return name
        return self.type or "Intervento"

    @property
    def formatted_cost(self) -> str:
        return f"€ {self.cost:.2f}"

    def attach_reminder(self, reminder: "Reminder") -> None:  # noqa: F821
        """Link a reminder to this maintenance (1:1) and refresh derived dates."""
        reminder.maintenance = self
        reminder.refresh_derived_date()
        self.reminder = reminder
