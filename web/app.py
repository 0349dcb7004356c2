"""Flask web application exposing garage reminders as JSON."""

import os
from datetime import date
from pathlib import Path

from flask import Flask, abort, jsonify, request

# Add parent directory to path for package imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from carminder import (
    Maintenance,
    MaintenanceType,
    NotificationScheduler,
    OutboxDispatcher,
    Reminder,
    ReminderType,
    load_garage,
    save_garage,
    upcoming_reminders,
)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
app.config["GARAGE_FILE"] = os.environ.get("GARAGE_FILE", "garage.yaml")
app.config["OUTBOX_FILE"] = os.environ.get("OUTBOX_FILE", "notifications.yaml")


def get_garage_path() -> Path:
    return Path(app.config["GARAGE_FILE"])


def get_scheduler(garage) -> NotificationScheduler:
    return NotificationScheduler(OutboxDispatcher(app.config["OUTBOX_FILE"]), garage.settings)


def get_today() -> date:
    """Reference date for computations, overridable with ?today=YYYY-MM-DD."""
    value = request.args.get("today")
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        abort(400, description=f"Invalid date '{value}'")


def load_car(garage, car_id: str):
    try:
        return garage.get_car(car_id)
    except (KeyError, ValueError):
        abort(404, description=f"Car '{car_id}' not found")


def car_summary(car, events) -> dict:
    return {
        "id": str(car.id),
        "name": car.display_name,
        "plate": car.plate,
        "mileage": car.mileage,
        "status": car.status.value,
        "maintenances": len(car.maintenances),
        "due": sum(1 for e in events if e.is_due),
        "upcoming": len(events),
    }


def event_to_dict(event) -> dict:
    """JSON view of a reminder event."""
    reminder = event.reminder
    return {
        "maintenanceType": event.maintenance_type,
        "displayType": event.maintenance.display_type,
        "reminderType": reminder.type,
        "dueDate": reminder.date.isoformat() if reminder.date else None,
        "dueMileage": reminder.mileage or None,
        "daysUntilDue": event.days_until_due,
        "isDue": event.is_due,
        "isCalculated": event.is_calculated,
        "urgency": event.urgency.name.lower(),
        "message": event.message,
        "reminderId": None if event.is_calculated else str(reminder.id),
    }


@app.errorhandler(400)
@app.errorhandler(404)
def json_error(error):
    return jsonify({"error": error.description}), error.code


@app.route("/")
def index():
    """All cars with a reminder summary."""
    garage = load_garage(get_garage_path())
    settings = garage.settings
    today = get_today()
    cars = []
    for car in garage.cars:
        events = upcoming_reminders(
            car, settings.horizon_days, today, settings.km_per_day, settings.locale
        )
        cars.append(car_summary(car, events))
    return jsonify({"cars": cars})


@app.route("/car/<car_id>/reminders")
def car_reminders(car_id: str):
    """Ranked upcoming reminders for a car."""
    garage = load_garage(get_garage_path())
    car = load_car(garage, car_id)
    settings = garage.settings

    horizon = request.args.get("horizon", type=int) or settings.horizon_days
    today = get_today()
    events = upcoming_reminders(car, horizon, today, settings.km_per_day, settings.locale)

    return jsonify(
        {
            "car": car_summary(car, events),
            "asOf": today.isoformat(),
            "reminders": [event_to_dict(e) for e in events],
        }
    )


@app.route("/car/<car_id>/maintenance", methods=["POST"])
def log_maintenance(car_id: str):
    """Record a maintenance from a JSON body, then resync notifications."""
    path = get_garage_path()
    garage = load_garage(path)
    car = load_car(garage, car_id)
    data = request.get_json(silent=True) or {}

    if data.get("type") not in {t.value for t in MaintenanceType}:
        abort(400, description=f"Invalid maintenance type {data.get('type')!r}")
    reminder_data = data.get("reminder")
    if reminder_data and reminder_data.get("type") not in {t.value for t in ReminderType}:
        abort(400, description=f"Invalid reminder type {reminder_data.get('type')!r}")

    try:
        maintenance = Maintenance(
            data["type"],
            date.fromisoformat(data["date"]) if data.get("date") else date.today(),
            mileage=int(data.get("mileage") or 0),
            cost=float(data.get("cost") or 0),
            notes=data.get("notes") or None,
            custom_type=data.get("customType") or None,
        )
        if reminder_data:
            maintenance.attach_reminder(
                Reminder(
                    reminder_data["type"],
                    date=date.fromisoformat(reminder_data["date"])
                    if reminder_data.get("date")
                    else None,
                    mileage=int(reminder_data.get("mileage") or 0),
                    interval_value=int(reminder_data.get("intervalValue") or 0),
                    interval_unit=reminder_data.get("intervalUnit"),
                )
            )
        elif data.get("defaultReminder"):
            default = Reminder.default_for(maintenance.type)
            if default is not None:
                maintenance.attach_reminder(default)
    except (KeyError, ValueError) as e:
        abort(400, description=f"Invalid maintenance: {e}")

    garage.add_maintenance(car.id, maintenance, on_change=get_scheduler(garage).on_change)
    save_garage(path, garage)

    return jsonify({"id": str(maintenance.id), "carMileage": car.mileage}), 201


@app.route("/car/<car_id>/mileage", methods=["POST"])
def update_mileage(car_id: str):
    """Update the odometer reading of a car."""
    path = get_garage_path()
    garage = load_garage(path)
    car = load_car(garage, car_id)
    data = request.get_json(silent=True) or {}

    try:
        mileage = int(data["mileage"])
        garage.update_mileage(car.id, mileage)
    except (KeyError, TypeError, ValueError):
        abort(400, description="Invalid mileage value")

    save_garage(path, garage)
    return jsonify({"id": str(car.id), "mileage": car.mileage})


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
