#!/usr/bin/env python3
"""Tests for notification dispatchers and the scheduler."""
import logging
from datetime import date, datetime

import pytest
import yaml

from carminder import (
    Car,
    InMemoryDispatcher,
    Maintenance,
    NotificationScheduler,
    OutboxDispatcher,
    Reminder,
    Settings,
)

NOW = datetime(2025, 6, 15, 9, 0)


@pytest.fixture
def car():
    car = Car("Panda", "Fiat", "Panda", 2018, mileage=50000)
    car.maintenances = [
        Maintenance("bollo", date(2024, 7, 1), reminder=Reminder.on_date(date(2025, 7, 1))),
        Maintenance("tagliando", date(2024, 8, 1), reminder=Reminder.every(1, "years")),
        Maintenance("gomme", date(2025, 1, 10), reminder=Reminder.at_mileage(60000)),
        Maintenance("assicurazione", date(2024, 5, 1), reminder=Reminder.on_date(date(2025, 5, 1))),
        Maintenance("revisione", date(2023, 6, 14)),
    ]
    return car


class FailingDispatcher:
    def schedule(self, identifier, title, body, trigger):
        raise RuntimeError("notification service unavailable")

    def cancel(self, identifier):
        raise RuntimeError("notification service unavailable")


class TestInMemoryDispatcher:
    def test_schedule_replaces_same_identifier(self):
        dispatcher = InMemoryDispatcher()
        dispatcher.schedule("reminder_1", "Title", "first", datetime(2025, 7, 1, 10))
        dispatcher.schedule("reminder_1", "Title", "second", datetime(2025, 7, 2, 10))

        assert len(dispatcher.pending) == 1
        assert dispatcher.pending["reminder_1"].body == "second"

    def test_cancel_unknown_is_noop(self):
        dispatcher = InMemoryDispatcher()
        dispatcher.cancel("reminder_missing")
        assert dispatcher.pending == {}


class TestOutboxDispatcher:
    def test_schedule_writes_yaml(self, tmp_path):
        outbox = tmp_path / "outbox.yaml"
        dispatcher = OutboxDispatcher(outbox)
        dispatcher.schedule("reminder_b", "Title", "later", datetime(2025, 8, 1, 10))
        dispatcher.schedule("reminder_a", "Title", "sooner", datetime(2025, 7, 1, 10))

        data = yaml.safe_load(outbox.read_text())
        assert [e["identifier"] for e in data["pending"]] == ["reminder_a", "reminder_b"]
        assert data["pending"][0]["trigger"] == "2025-07-01T10:00"

    def test_pending_round_trip(self, tmp_path):
        dispatcher = OutboxDispatcher(tmp_path / "outbox.yaml")
        dispatcher.schedule("reminder_a", "Promemoria", "body", datetime(2025, 7, 1, 10))

        pending = OutboxDispatcher(tmp_path / "outbox.yaml").pending()
        assert len(pending) == 1
        assert pending[0].identifier == "reminder_a"
        assert pending[0].trigger == datetime(2025, 7, 1, 10)

    def test_cancel(self, tmp_path):
        dispatcher = OutboxDispatcher(tmp_path / "outbox.yaml")
        dispatcher.schedule("reminder_a", "T", "a", datetime(2025, 7, 1, 10))
        dispatcher.schedule("reminder_b", "T", "b", datetime(2025, 7, 2, 10))
        dispatcher.cancel("reminder_a")

        assert [n.identifier for n in dispatcher.pending()] == ["reminder_b"]

    def test_missing_file_has_nothing_pending(self, tmp_path):
        assert OutboxDispatcher(tmp_path / "none.yaml").pending() == []


class TestNotificationScheduler:
    def test_schedule_date_reminder(self, car):
        dispatcher = InMemoryDispatcher()
        scheduler = NotificationScheduler(dispatcher, Settings(advance_days=7))
        bollo = car.maintenances[0]

        notification = scheduler.schedule_reminder(bollo.reminder, bollo, car, NOW)

        assert notification.trigger == datetime(2025, 6, 24, 10, 0)
        assert dispatcher.pending[f"reminder_{bollo.reminder.id}"] == notification

    def test_mileage_reminder_not_scheduled(self, car):
        dispatcher = InMemoryDispatcher()
        scheduler = NotificationScheduler(dispatcher)
        gomme = car.maintenances[2]

        assert scheduler.schedule_reminder(gomme.reminder, gomme, car, NOW) is None
        assert dispatcher.pending == {}

    def test_settings_drive_trigger(self, car):
        dispatcher = InMemoryDispatcher()
        scheduler = NotificationScheduler(
            dispatcher, Settings(advance_days=1, notification_hour=8, locale="en")
        )
        bollo = car.maintenances[0]

        notification = scheduler.schedule_reminder(bollo.reminder, bollo, car, NOW)

        assert notification.trigger == datetime(2025, 6, 30, 8, 0)
        assert notification.title == "Maintenance reminder"

    def test_dispatcher_failure_is_logged(self, car, caplog):
        scheduler = NotificationScheduler(FailingDispatcher())
        bollo = car.maintenances[0]

        with caplog.at_level(logging.ERROR, logger="carminder.notifications"):
            result = scheduler.schedule_reminder(bollo.reminder, bollo, car, NOW)

        assert result is None
        assert "Failed to schedule notification" in caplog.text

    def test_cancel_failure_is_logged(self, car, caplog):
        scheduler = NotificationScheduler(FailingDispatcher())

        with caplog.at_level(logging.ERROR, logger="carminder.notifications"):
            scheduler.remove_reminder(car.maintenances[0].reminder)

        assert "Failed to cancel notification" in caplog.text

    def test_resync_schedules_future_timed_reminders(self, car):
        dispatcher = InMemoryDispatcher()
        scheduler = NotificationScheduler(dispatcher)

        scheduled = scheduler.resync(car, NOW)

        # bollo (2025-07-01) and tagliando (2025-08-01); assicurazione is
        # past, gomme is mileage based, revisione has no reminder
        expected = {
            f"reminder_{car.maintenances[0].reminder.id}",
            f"reminder_{car.maintenances[1].reminder.id}",
        }
        assert {n.identifier for n in scheduled} == expected
        assert set(dispatcher.pending) == expected

    def test_resync_is_idempotent(self, car):
        dispatcher = InMemoryDispatcher()
        scheduler = NotificationScheduler(dispatcher)

        first = scheduler.resync(car, NOW)
        second = scheduler.resync(car, NOW)

        assert first == second
        assert len(dispatcher.pending) == 2

    def test_resync_drops_stale_notifications(self, car):
        dispatcher = InMemoryDispatcher()
        scheduler = NotificationScheduler(dispatcher)
        scheduler.resync(car, NOW)

        bollo = car.maintenances[0]
        bollo.reminder.date = date(2025, 6, 1)
        scheduler.resync(car, NOW)

        assert f"reminder_{bollo.reminder.id}" not in dispatcher.pending

    def test_remove_all(self, car):
        dispatcher = InMemoryDispatcher()
        scheduler = NotificationScheduler(dispatcher)
        scheduler.resync(car, NOW)

        scheduler.remove_all(car)

        assert dispatcher.pending == {}

    def test_on_change_cancels_removed_reminders(self, car):
        dispatcher = InMemoryDispatcher()
        scheduler = NotificationScheduler(dispatcher)
        scheduler.resync(car, NOW)

        bollo = car.maintenances.pop(0)
        scheduler.on_change(car, [bollo.reminder])

        assert f"reminder_{bollo.reminder.id}" not in dispatcher.pending
