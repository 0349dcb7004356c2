"""Garage class - the aggregate holding every car and its records."""

import logging
import uuid
from datetime import date
from typing import Callable, List, Optional, Union

from .car import Car
from .config import Settings
from .document import Document
from .maintenance import Maintenance
from .reminder import Reminder, ReminderType, plain_value

logger = logging.getLogger(__name__)

# Called after maintenance or reminder data of a car changed, with the
# reminders that were removed by the change
ChangeCallback = Callable[[Car, List[Reminder]], None]

IdLike = Union[str, uuid.UUID]


def _as_uuid(value: IdLike) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


class Garage:
    """All cars of a user, with create/read/update/delete operations."""

    def __init__(self, cars: Optional[List[Car]] = None, settings: Optional[Settings] = None):
        self.cars = cars or []
        self.settings = settings or Settings()

    # -------------------------------------------------------------------------
    # Cars
    # -------------------------------------------------------------------------

    def add_car(self, car: Car) -> Car:
        self.cars.append(car)
        return car

    def get_car(self, car_id: IdLike) -> Car:
        """Find a car by id. Raises KeyError when unknown."""
        wanted = _as_uuid(car_id)
        for car in self.cars:
            if car.id == wanted:
                return car
        raise KeyError(f"Unknown car {car_id}")

    def find_car(self, text: str) -> Car:
        """Find a car by id, id prefix, plate or name (case-insensitive)."""
        needle = text.lower()
        for car in self.cars:
            if str(car.id).startswith(needle) or car.plate.lower() == needle:
                return car
        for car in self.cars:
            if car.display_name.lower() == needle:
                return car
        raise KeyError(f"Unknown car '{text}'")

    def delete_car(self, car_id: IdLike, on_change: Optional[ChangeCallback] = None) -> Car:
        """Remove a car together with its maintenances, reminders and documents."""
        car = self.get_car(car_id)
        removed = [m.reminder for m in car.maintenances if m.reminder is not None]
        self.cars.remove(car)
        car.maintenances = []
        car.documents = []
        if on_change is not None:
            on_change(car, removed)
        return car

    @property
    def active_cars(self) -> List[Car]:
        return [car for car in self.cars if car.is_active]

    def set_car_status(self, car_id: IdLike, status: str, today: Optional[date] = None) -> Car:
        car = self.get_car(car_id)
        car.set_status(status, today)
        return car

    def update_mileage(self, car_id: IdLike, mileage: int) -> Car:
        """Record a new odometer reading. Lower readings are ignored."""
        car = self.get_car(car_id)
        if mileage < 0:
            raise ValueError(f"Mileage must be non-negative, got {mileage}")
        if mileage > car.mileage:
            car.mileage = mileage
        else:
            logger.info("Ignoring mileage %d lower than current %d", mileage, car.mileage)
        return car

    # -------------------------------------------------------------------------
    # Maintenances and reminders
    # -------------------------------------------------------------------------

    def get_maintenance(self, maintenance_id: IdLike) -> Maintenance:
        wanted = _as_uuid(maintenance_id)
        for car in self.cars:
            for maintenance in car.maintenances:
                if maintenance.id == wanted:
                    return maintenance
        raise KeyError(f"Unknown maintenance {maintenance_id}")

    def car_of(self, maintenance: Maintenance) -> Car:
        for car in self.cars:
            if maintenance in car.maintenances:
                return car
        raise KeyError(f"Maintenance {maintenance.id} belongs to no car")

    def add_maintenance(
        self,
        car_id: IdLike,
        maintenance: Maintenance,
        on_change: Optional[ChangeCallback] = None,
    ) -> Maintenance:
        """Add a maintenance to a car, raising the car mileage if it is higher."""
        car = self.get_car(car_id)
        car.maintenances.append(maintenance)
        if maintenance.mileage and maintenance.mileage > car.mileage:
            car.mileage = maintenance.mileage
        if on_change is not None:
            on_change(car, [])
        return maintenance

    def update_maintenance(
        self,
        maintenance_id: IdLike,
        on_change: Optional[ChangeCallback] = None,
        **changes,
    ) -> Maintenance:
        """
        Update maintenance fields (type, custom_type, date, mileage, cost, notes).

        An attached interval reminder gets its derived date refreshed.
        """
        maintenance = self.get_maintenance(maintenance_id)
        car = self.car_of(maintenance)
        allowed = {"type", "custom_type", "date", "mileage", "cost", "notes"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Cannot update maintenance fields: {', '.join(sorted(unknown))}")
        if changes.get("cost") is not None and changes["cost"] < 0:
            raise ValueError(f"Maintenance cost must be non-negative, got {changes['cost']}")

        for name, value in changes.items():
            setattr(maintenance, name, plain_value(value))
        if maintenance.type != "custom":
            maintenance.custom_type = None
        if maintenance.mileage and maintenance.mileage > car.mileage:
            car.mileage = maintenance.mileage
        if maintenance.reminder is not None:
            maintenance.reminder.refresh_derived_date()

        if on_change is not None:
            on_change(car, [])
        return maintenance

    def delete_maintenance(
        self, maintenance_id: IdLike, on_change: Optional[ChangeCallback] = None
    ) -> Maintenance:
        """Remove a maintenance and its reminder."""
        maintenance = self.get_maintenance(maintenance_id)
        car = self.car_of(maintenance)
        car.maintenances.remove(maintenance)
        removed = [maintenance.reminder] if maintenance.reminder is not None else []
        maintenance.reminder = None
        if on_change is not None:
            on_change(car, removed)
        return maintenance

    def set_reminder(
        self,
        maintenance_id: IdLike,
        reminder: Reminder,
        on_change: Optional[ChangeCallback] = None,
    ) -> Reminder:
        """Attach a reminder to a maintenance, replacing any existing one."""
        if reminder.type not in {t.value for t in ReminderType}:
            raise ValueError(f"Unknown reminder type '{reminder.type}'")
        maintenance = self.get_maintenance(maintenance_id)
        car = self.car_of(maintenance)
        previous = maintenance.reminder
        if previous is not None and previous.id != reminder.id:
            removed = [previous]
        else:
            removed = []
        maintenance.attach_reminder(reminder)
        if on_change is not None:
            on_change(car, removed)
        return reminder

    def remove_reminder(
        self, maintenance_id: IdLike, on_change: Optional[ChangeCallback] = None
    ) -> Optional[Reminder]:
        maintenance = self.get_maintenance(maintenance_id)
        car = self.car_of(maintenance)
        reminder = maintenance.reminder
        maintenance.reminder = None
        if on_change is not None:
            on_change(car, [reminder] if reminder is not None else [])
        return reminder

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def add_document(self, car_id: IdLike, document: Document) -> Document:
        self.get_car(car_id).documents.append(document)
        return document

    def delete_document(self, document_id: IdLike) -> Document:
        wanted = _as_uuid(document_id)
        for car in self.cars:
            for document in car.documents:
                if document.id == wanted:
                    car.documents.remove(document)
                    return document
        raise KeyError(f"Unknown document {document_id}")
