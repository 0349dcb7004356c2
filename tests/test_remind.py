#!/usr/bin/env python3
"""Tests for the remind CLI: formatting helpers and commands."""
import argparse
from datetime import date

import pytest
import yaml

from carminder import (
    Car,
    Garage,
    Maintenance,
    Reminder,
    load_garage,
    save_garage,
    upcoming_reminders,
)
from remind import (
    build_reminder,
    format_cost,
    format_days,
    format_km,
    main,
    make_history_table,
    make_reminder_table,
    parse_interval,
    truncate,
)

from conftest import PANDA_ID, TODAY


def run(garage_file, *argv):
    return main([str(garage_file), "--today", TODAY.isoformat(), *argv])


class TestFormatKm:
    def test_formats_number(self):
        assert format_km(50000) == "50,000"
        assert format_km(0) == "0"

    def test_none_returns_dash(self):
        assert format_km(None) == "-"


class TestFormatCost:
    def test_formats_number(self):
        assert format_cost(1234.5) == "€1,234.50"
        assert format_cost(0) == "€0.00"

    def test_none_returns_dash(self):
        assert format_cost(None) == "-"


class TestFormatDays:
    def test_none_returns_dash(self):
        assert format_days(None) == "-"

    def test_positive_months_and_days(self):
        assert format_days(105) == "3mo 15d"

    def test_positive_days_only(self):
        assert format_days(14) == "14d"

    def test_negative_overdue_months(self):
        assert format_days(-65) == "-2mo 5d"

    def test_negative_overdue_days_only(self):
        assert format_days(-5) == "-5d"


class TestTruncate:
    def test_none_returns_dash(self):
        assert truncate(None) == "-"

    def test_short_text_unchanged(self):
        assert truncate("Olio e filtri") == "Olio e filtri"

    def test_long_text_truncated_with_ellipsis(self):
        assert truncate("x" * 50) == "x" * 37 + "..."

    def test_custom_max_len(self):
        assert truncate("Cambio gomme invernali", 10) == "Cambio ..."


class TestParseInterval:
    def test_plural_and_singular(self):
        assert parse_interval("6 months") == (6, "months")
        assert parse_interval("1 year") == (1, "years")

    @pytest.mark.parametrize("text", ["six months", "3 weeks", "12"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_interval(text)


class TestBuildReminder:
    def args(self, **kwargs):
        defaults = dict(
            type="tagliando",
            remind_date=None,
            remind_km=None,
            remind_every=None,
            default_reminder=False,
        )
        defaults.update(kwargs)
        return argparse.Namespace(**defaults)

    def test_none_requested(self):
        assert build_reminder(self.args()) is None

    def test_date(self):
        reminder = build_reminder(self.args(remind_date="2025-12-01"))
        assert (reminder.type, reminder.date) == ("date", date(2025, 12, 1))

    def test_date_and_km(self):
        reminder = build_reminder(self.args(remind_date="2025-12-01", remind_km=60000))
        assert (reminder.type, reminder.mileage) == ("both", 60000)

    def test_km(self):
        assert build_reminder(self.args(remind_km=60000)).type == "mileage"

    def test_interval(self):
        reminder = build_reminder(self.args(remind_every="6 months"))
        assert (reminder.interval_value, reminder.interval_unit) == (6, "months")

    def test_default(self):
        reminder = build_reminder(self.args(type="revisione", default_reminder=True))
        assert (reminder.interval_value, reminder.interval_unit) == (2, "years")


class TestTables:
    def test_reminder_rows(self, garage_file):
        car = load_garage(garage_file).get_car(PANDA_ID)
        rows = make_reminder_table(upcoming_reminders(car, today=TODAY), "it")

        assert [row[0] for row in rows] == ["Bollo", "Revisione", "Tagliando", "Cambio gomme"]
        assert rows[0][1:5] == ["10/06/2025", "-", "-5d", "reminder"]
        assert rows[2][4] == "predicted"
        assert rows[3][1:4] == ["-", "60,000", "6mo 20d"]

    def test_history_rows(self):
        m = Maintenance("tagliando", date(2024, 6, 20), mileage=45000, cost=250.0,
                        notes="Olio e filtri", reminder=Reminder.every(1, "years"))
        assert make_history_table([m]) == [
            ["2024-06-20", "45,000", "Tagliando", "€250.00", "Ogni 1 anni", "Olio e filtri"]
        ]


class TestCommands:
    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "none.yaml"), "cars"]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_cars(self, garage_file, capsys):
        assert run(garage_file, "cars") == 0
        out = capsys.readouterr().out
        assert "Panda" in out
        assert "Auto venduta il 01/03/2024" in out

    def test_reminders_grouped_by_urgency(self, garage_file, capsys):
        assert run(garage_file, "reminders") == 0
        out = capsys.readouterr().out

        assert "Car: Panda (AB123CD)" in out
        assert "Golf" not in out
        assert out.index("OVERDUE:") < out.index("WITHIN 30 DAYS:") < out.index("LATER:")
        assert "WITHIN 90 DAYS:" not in out
        assert "Tagliando previsto tra 5 giorni" in out

    def test_reminders_for_sold_car(self, garage_file, capsys):
        assert run(garage_file, "reminders", "--car", "golf") == 0
        assert "No upcoming maintenance." in capsys.readouterr().out

    def test_unknown_car(self, garage_file, capsys):
        assert run(garage_file, "reminders", "--car", "Multipla") == 1
        assert "Error: Unknown car 'Multipla'" in capsys.readouterr().out

    def test_history_filtered(self, garage_file, capsys):
        assert run(garage_file, "history", "--car", "AB123CD", "--type", "tagliando") == 0
        out = capsys.readouterr().out
        assert "Showing: 1 (filtered)" in out
        assert "Olio e filtri" in out
        assert "Cambio gomme" not in out

    def test_log_saves_and_schedules(self, garage_file, tmp_path):
        outbox = tmp_path / "outbox.yaml"

        result = run(
            garage_file, "log", "tagliando", "--car", "Panda", "--km", "51000",
            "--cost", "200", "--remind-date", "2099-01-10", "--outbox", str(outbox),
        )

        assert result == 0
        car = load_garage(garage_file).get_car(PANDA_ID)
        assert car.mileage == 51000
        logged = [m for m in car.maintenances if m.date == TODAY]
        assert len(logged) == 1
        assert logged[0].reminder.date == date(2099, 1, 10)

        pending = yaml.safe_load(outbox.read_text())["pending"]
        assert [e["identifier"] for e in pending] == [f"reminder_{logged[0].reminder.id}"]
        assert pending[0]["trigger"] == "2099-01-07T10:00"

    def test_log_default_reminder(self, garage_file, tmp_path):
        run(garage_file, "log", "revisione", "--car", "Panda", "--default-reminder",
            "--outbox", str(tmp_path / "outbox.yaml"))

        car = load_garage(garage_file).get_car(PANDA_ID)
        logged = [m for m in car.maintenances if m.date == TODAY]
        assert logged[0].reminder.date == date(2027, 6, 15)

    def test_log_dry_run(self, garage_file, tmp_path, capsys):
        before = garage_file.read_text()
        assert run(garage_file, "log", "bollo", "--car", "Panda", "--dry-run",
                   "--outbox", str(tmp_path / "outbox.yaml")) == 0
        assert garage_file.read_text() == before
        assert "dry run" in capsys.readouterr().out

    def test_log_bad_interval(self, garage_file, capsys):
        assert run(garage_file, "log", "gomme", "--car", "Panda", "--remind-every", "often") == 1
        assert "Error: Invalid interval" in capsys.readouterr().out

    def test_update_km(self, garage_file):
        assert run(garage_file, "update-km", "52000", "--car", "Panda") == 0
        assert load_garage(garage_file).get_car(PANDA_ID).mileage == 52000

    def test_update_km_lower_rejected(self, garage_file, capsys):
        assert run(garage_file, "update-km", "40000", "--car", "Panda") == 1
        assert "lower than current" in capsys.readouterr().out
        assert load_garage(garage_file).get_car(PANDA_ID).mileage == 50000

    def test_notify_past_reminders(self, garage_file, tmp_path, capsys):
        assert run(garage_file, "notify", "--outbox", str(tmp_path / "outbox.yaml")) == 0
        assert "Scheduled notifications: 0" in capsys.readouterr().out

    def test_notify_future_reminder(self, tmp_path, capsys):
        car = Car("Panda", "Fiat", "Panda", 2018)
        car.maintenances.append(
            Maintenance("bollo", date(2098, 1, 10), reminder=Reminder.on_date(date(2099, 1, 10)))
        )
        path = tmp_path / "garage.yaml"
        save_garage(path, Garage([car]))
        outbox = tmp_path / "outbox.yaml"

        assert main([str(path), "notify", "--outbox", str(outbox)]) == 0

        out = capsys.readouterr().out
        assert "Scheduled notifications: 1" in out
        assert "2099-01-03 10:00" in out
