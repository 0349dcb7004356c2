#!/usr/bin/env python3
"""Tests for the Flask JSON API."""
import pytest
import yaml

from carminder import load_garage
from web.app import app

from conftest import GOLF_ID, PANDA_ID, TODAY


@pytest.fixture
def client(garage_file, tmp_path):
    app.config["TESTING"] = True
    app.config["GARAGE_FILE"] = str(garage_file)
    app.config["OUTBOX_FILE"] = str(tmp_path / "outbox.yaml")
    with app.test_client() as client:
        yield client


class TestIndex:
    def test_lists_cars(self, client):
        response = client.get(f"/?today={TODAY.isoformat()}")

        assert response.status_code == 200
        cars = {c["id"]: c for c in response.get_json()["cars"]}
        assert cars[PANDA_ID]["due"] == 2
        assert cars[PANDA_ID]["upcoming"] == 4
        assert cars[GOLF_ID]["status"] == "sold"

    def test_invalid_today(self, client):
        response = client.get("/?today=yesterday")
        assert response.status_code == 400
        assert "Invalid date" in response.get_json()["error"]


class TestCarReminders:
    def test_ranked_reminders(self, client):
        response = client.get(f"/car/{PANDA_ID}/reminders?today={TODAY.isoformat()}")

        data = response.get_json()
        assert data["asOf"] == "2025-06-15"
        reminders = data["reminders"]
        assert [r["maintenanceType"] for r in reminders] == [
            "bollo", "revisione", "tagliando", "gomme"
        ]
        assert [r["daysUntilDue"] for r in reminders] == [-5, -1, 5, 200]
        assert reminders[0]["urgency"] == "overdue"
        assert reminders[2]["isCalculated"] is True
        assert reminders[2]["reminderId"] is None
        assert reminders[2]["dueDate"] == "2025-06-20"
        assert reminders[3]["dueMileage"] == 60000

    def test_horizon(self, client):
        response = client.get(f"/car/{PANDA_ID}/reminders?today=2025-05-01&horizon=30")
        types = [r["maintenanceType"] for r in response.get_json()["reminders"]]
        # tagliando predicted 50 days out, beyond the horizon
        assert "tagliando" not in types

    def test_unknown_car(self, client):
        assert client.get("/car/00000000-0000-0000-0000-000000000000/reminders").status_code == 404

    def test_malformed_id(self, client):
        assert client.get("/car/panda/reminders").status_code == 404


class TestLogMaintenance:
    def test_records_and_schedules(self, client, garage_file, tmp_path):
        response = client.post(
            f"/car/{PANDA_ID}/maintenance",
            json={
                "type": "assicurazione",
                "date": "2098-03-01",
                "mileage": 52000,
                "cost": 420,
                "reminder": {"type": "date", "date": "2099-03-01"},
            },
        )

        assert response.status_code == 201
        assert response.get_json()["carMileage"] == 52000
        car = load_garage(garage_file).get_car(PANDA_ID)
        assert "assicurazione" in {m.type for m in car.maintenances}

        pending = yaml.safe_load((tmp_path / "outbox.yaml").read_text())["pending"]
        assert len(pending) == 1
        assert pending[0]["trigger"] == "2099-02-26T10:00"

    def test_default_reminder(self, client, garage_file):
        response = client.post(
            f"/car/{PANDA_ID}/maintenance",
            json={"type": "gomme", "date": "2025-06-15", "defaultReminder": True},
        )

        new_id = response.get_json()["id"]
        car = load_garage(garage_file).get_car(PANDA_ID)
        logged = [m for m in car.maintenances if str(m.id) == new_id][0]
        assert logged.reminder.interval_value == 6
        assert logged.reminder.interval_unit == "months"

    def test_invalid_type(self, client):
        response = client.post(f"/car/{PANDA_ID}/maintenance", json={"type": "lavaggio"})
        assert response.status_code == 400

    def test_invalid_reminder_type(self, client):
        response = client.post(
            f"/car/{PANDA_ID}/maintenance",
            json={"type": "bollo", "reminder": {"type": "weekly"}},
        )
        assert response.status_code == 400

    def test_negative_cost(self, client):
        response = client.post(f"/car/{PANDA_ID}/maintenance", json={"type": "bollo", "cost": -10})
        assert response.status_code == 400
        assert "Invalid maintenance" in response.get_json()["error"]


class TestUpdateMileage:
    def test_updates(self, client, garage_file):
        response = client.post(f"/car/{PANDA_ID}/mileage", json={"mileage": 55000})
        assert response.get_json()["mileage"] == 55000
        assert load_garage(garage_file).get_car(PANDA_ID).mileage == 55000

    def test_lower_reading_ignored(self, client):
        response = client.post(f"/car/{PANDA_ID}/mileage", json={"mileage": 1000})
        assert response.status_code == 200
        assert response.get_json()["mileage"] == 50000

    def test_invalid(self, client):
        response = client.post(f"/car/{PANDA_ID}/mileage", json={"mileage": "lots"})
        assert response.status_code == 400
