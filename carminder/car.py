"""Car class for vehicle identification and lifecycle."""

import uuid
from datetime import date
from enum import Enum
from typing import List, Optional


class CarStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"
    SCRAPPED = "scrapped"

    @property
    def display_name(self) -> str:
        return {
            CarStatus.ACTIVE: "Attiva",
            CarStatus.SOLD: "Venduta",
            CarStatus.SCRAPPED: "Rottamata",
        }[self]

    @property
    def description(self) -> str:
        return {
            CarStatus.ACTIVE: "Auto in uso",
            CarStatus.SOLD: "Auto venduta",
            CarStatus.SCRAPPED: "Auto rottamata",
        }[self]


class Car:
    """A vehicle with its maintenance records and documents."""

    def __init__(
        self,
        name: str,
        brand: str,
        model: str,
        year: int,
        plate: str = "",
        mileage: int = 0,
        registration_date: Optional[date] = None,
        date_added: Optional[date] = None,
        status: str = CarStatus.ACTIVE.value,
        status_date: Optional[date] = None,
        notes: Optional[str] = None,
        image: Optional[bytes] = None,
        id: Optional[uuid.UUID] = None,
    ):
        self.id = id or uuid.uuid4()
        self.name = name
        self.brand = brand
        self.model = model
        self.year = year
        self.plate = plate
        self.mileage = mileage
        self.registration_date = registration_date
        self.date_added = date_added or date.today()
        self.status = CarStatus(status)
        self.status_date = status_date
        self.notes = notes
        self.image = image
        self.maintenances = []
        self.documents = []

    @property
    def display_name(self) -> str:
        """Car name, falling back to brand and model."""
        if self.name:
            return self.name
        return f"{self.brand} {self.model}".strip() or "Auto"

    @property
    def is_active(self) -> bool:
        return self.status == CarStatus.ACTIVE

    def set_status(self, status: str, today: Optional[date] = None) -> None:
        """
        Change lifecycle status.

        Leaving ACTIVE stamps the status date (unless one is already set);
        returning to ACTIVE clears it.
        """
        self.status = CarStatus(status)
        if self.status == CarStatus.ACTIVE:
            self.status_date = None
        elif self.status_date is None:
            self.status_date = today or date.today()

    @property
    def status_description(self) -> str:
        if self.status != CarStatus.ACTIVE and self.status_date:
            return f"{self.status.description} il {self.status_date.strftime('%d/%m/%Y')}"
        return self.status.description

    @property
    def maintenance_array(self) -> List["Maintenance"]:  # noqa: F821
        """Maintenances sorted newest first (undated last)."""
        return sorted(
            self.maintenances, key=lambda m: m.date or date.min, reverse=True
        )

    @property
    def documents_array(self) -> List["Document"]:  # noqa: F821
        return sorted(
            self.documents, key=lambda d: d.date_added or date.min, reverse=True
        )
