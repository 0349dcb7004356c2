"""YAML loading and saving utilities for garage data."""

import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .car import Car
from .config import Settings
from .document import Document
from .garage import Garage
from .maintenance import Maintenance
from .reminder import Reminder


def _parse_date(value: Any) -> Optional[date]:
    """Dates may come back from YAML as date objects or ISO strings."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _format_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_id(value: Any) -> Optional[uuid.UUID]:
    return uuid.UUID(str(value)) if value else None


def _parse_reminder(dct: Dict[str, Any]) -> Reminder:
    return Reminder(
        dct["type"],
        date=_parse_date(dct.get("date")),
        mileage=dct.get("mileage") or 0,
        interval_value=dct.get("intervalValue") or 0,
        interval_unit=dct.get("intervalUnit"),
        id=_parse_id(dct.get("id")),
    )


def _parse_maintenance(dct: Dict[str, Any]) -> Maintenance:
    reminder = dct.get("reminder")
    return Maintenance(
        dct["type"],
        _parse_date(dct.get("date")),
        mileage=dct.get("mileage") or 0,
        cost=dct.get("cost") or 0.0,
        notes=dct.get("notes"),
        custom_type=dct.get("customType"),
        reminder=_parse_reminder(reminder) if reminder else None,
        id=_parse_id(dct.get("id")),
    )


def _parse_document(dct: Dict[str, Any]) -> Document:
    return Document(
        dct["name"],
        dct.get("type") or "application/octet-stream",
        size=dct.get("size") or 0,
        date_added=_parse_date(dct.get("dateAdded")),
        notes=dct.get("notes"),
        path=dct.get("path"),
        id=_parse_id(dct.get("id")),
    )


def _parse_car(dct: Dict[str, Any]) -> Car:
    car = Car(
        dct.get("name") or "",
        dct.get("brand") or "",
        dct.get("model") or "",
        dct.get("year"),
        plate=dct.get("plate") or "",
        mileage=dct.get("mileage") or 0,
        registration_date=_parse_date(dct.get("registrationDate")),
        date_added=_parse_date(dct.get("dateAdded")),
        status=dct.get("status") or "active",
        status_date=_parse_date(dct.get("statusDate")),
        notes=dct.get("notes"),
        image=dct.get("image"),
        id=_parse_id(dct.get("id")),
    )
    car.maintenances = [_parse_maintenance(m) for m in dct.get("maintenances") or []]
    car.documents = [_parse_document(d) for d in dct.get("documents") or []]
    return car


def load_garage(filename: Union[str, Path]) -> Garage:
    """Load a garage from a YAML file."""
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
    return Garage(
        cars=[_parse_car(c) for c in data.get("cars") or []],
        settings=Settings.from_dict(data.get("settings")),
    )


def _reminder_to_dict(reminder: Reminder) -> Dict[str, Any]:
    """Serialize a Reminder to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {"id": str(reminder.id), "type": reminder.type}
    if reminder.date is not None:
        d["date"] = _format_date(reminder.date)
    if reminder.mileage:
        d["mileage"] = reminder.mileage
    if reminder.interval_value:
        d["intervalValue"] = reminder.interval_value
    if reminder.interval_unit is not None:
        d["intervalUnit"] = reminder.interval_unit
    return d


def _maintenance_to_dict(maintenance: Maintenance) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": str(maintenance.id),
        "type": maintenance.type,
        "date": _format_date(maintenance.date),
        "mileage": maintenance.mileage,
        "cost": maintenance.cost,
    }
    if maintenance.custom_type is not None:
        d["customType"] = maintenance.custom_type
    if maintenance.notes is not None:
        d["notes"] = maintenance.notes
    if maintenance.reminder is not None:
        d["reminder"] = _reminder_to_dict(maintenance.reminder)
    return d


def _document_to_dict(document: Document) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": str(document.id),
        "name": document.name,
        "type": document.type,
        "size": document.size,
        "dateAdded": _format_date(document.date_added),
    }
    if document.notes is not None:
        d["notes"] = document.notes
    if document.path is not None:
        d["path"] = document.path
    return d


def _car_to_dict(car: Car) -> Dict[str, Any]:
    """Serialize a Car to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": str(car.id),
        "name": car.name,
        "brand": car.brand,
        "model": car.model,
        "year": car.year,
        "plate": car.plate,
        "mileage": car.mileage,
        "dateAdded": _format_date(car.date_added),
        "status": car.status.value,
    }
    if car.registration_date is not None:
        d["registrationDate"] = _format_date(car.registration_date)
    if car.status_date is not None:
        d["statusDate"] = _format_date(car.status_date)
    if car.notes is not None:
        d["notes"] = car.notes
    if car.image is not None:
        d["image"] = car.image
    d["maintenances"] = [_maintenance_to_dict(m) for m in car.maintenance_array]
    d["documents"] = [_document_to_dict(doc) for doc in car.documents_array]
    return d


def save_garage(filename: Union[str, Path], garage: Garage) -> None:
    """Write a garage to a YAML file, replacing its contents."""
    data: Dict[str, Any] = {}
    settings = garage.settings.to_dict()
    if settings:
        data["settings"] = settings
    data["cars"] = [_car_to_dict(car) for car in garage.cars]

    with open(filename, "w") as fp:
        yaml.safe_dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def create_garage(filename: Union[str, Path], settings: Optional[Settings] = None) -> Garage:
    """Create a new, empty garage YAML file."""
    garage = Garage(settings=settings)
    save_garage(filename, garage)
    return garage
