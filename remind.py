#!/usr/bin/env python3
"""
Unified CLI for car maintenance reminders.

Commands:
  cars       - List cars in the garage
  reminders  - Show upcoming and overdue maintenance, most urgent first
  history    - View maintenance history of a car
  log        - Record a maintenance (optionally with a reminder)
  update-km  - Update the odometer reading of a car
  notify     - Reschedule push notifications into an outbox file
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from carminder import (
    Car,
    Maintenance,
    MaintenanceType,
    Reminder,
    ReminderEvent,
    Urgency,
    NotificationScheduler,
    OutboxDispatcher,
    load_garage,
    save_garage,
    upcoming_reminders,
)
from carminder.messages import format_date

DEFAULT_OUTBOX = "notifications.yaml"

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format odometer reading for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"€{cost:,.2f}" if cost is not None else "-"


def format_days(days: Optional[int]) -> str:
    """Format days until due for display (e.g., '3mo 15d' or '-2mo 5d')."""
    if days is None:
        return "-"

    sign = "-" if days < 0 else ""
    days = abs(days)
    months = days // 30
    remaining_days = days % 30
    if months > 0:
        return f"{sign}{months}mo {remaining_days}d"
    return f"{sign}{days}d"


def truncate(text: Optional[str], max_len: int = 40) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def parse_interval(text: str):
    """Parse an interval such as '6 months' or '2 years' into (value, unit)."""
    parts = text.split()
    if len(parts) != 2 or not parts[0].isdigit():
        raise ValueError(f"Invalid interval '{text}' (expected e.g. '6 months')")
    unit = parts[1].lower()
    if not unit.endswith("s"):
        unit += "s"
    if unit not in ("months", "years"):
        raise ValueError(f"Invalid interval unit '{parts[1]}' (months or years)")
    return int(parts[0]), unit


# =============================================================================
# Cars command
# =============================================================================


def cmd_cars(args, garage):
    """List cars in the garage."""
    settings = garage.settings
    rows = []
    for car in garage.cars:
        events = upcoming_reminders(
            car, settings.horizon_days, args.today, settings.km_per_day, settings.locale
        )
        rows.append(
            [
                str(car.id)[:8],
                car.display_name,
                car.plate or "-",
                format_km(car.mileage),
                car.status_description,
                len(car.maintenances),
                sum(1 for e in events if e.is_due),
            ]
        )

    if not rows:
        print("No cars in garage.")
        return 0

    headers = ["Id", "Car", "Plate", "Km", "Status", "Maintenances", "Due"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Reminders command
# =============================================================================


def make_reminder_table(events: List[ReminderEvent], locale: str) -> List[List[str]]:
    """Convert reminder events to table rows."""
    rows = []
    for event in events:
        due = event.reminder.date if event.reminder.type != "mileage" else None
        rows.append(
            [
                event.maintenance.display_type,
                format_date(due, locale) if due else "-",
                format_km(event.reminder.mileage) if event.reminder.mileage else "-",
                format_days(event.days_until_due),
                "predicted" if event.is_calculated else "reminder",
                truncate(event.message),
            ]
        )
    return rows


def print_car_reminders(car: Car, settings, today: date) -> None:
    events = upcoming_reminders(
        car, settings.horizon_days, today, settings.km_per_day, settings.locale
    )

    print(f"Car: {car.display_name} ({car.plate or 'no plate'})")
    print(f"Current km: {format_km(car.mileage)} (as of {today.isoformat()})")
    print()

    if not events:
        print("No upcoming maintenance.")
        print()
        return

    headers = ["Maintenance", "Due (date)", "Due (km)", "Remaining", "Source", "Message"]
    sections = [
        (Urgency.OVERDUE, "OVERDUE:"),
        (Urgency.HIGH, "WITHIN 30 DAYS:"),
        (Urgency.MEDIUM, "WITHIN 90 DAYS:"),
        (Urgency.LOW, "LATER:"),
    ]
    for urgency, title in sections:
        group = [e for e in events if e.urgency == urgency]
        if group:
            print(title)
            print(
                tabulate(
                    make_reminder_table(group, settings.locale),
                    headers=headers,
                    tablefmt="simple",
                )
            )
            print()


def cmd_reminders(args, garage):
    """Show upcoming and overdue maintenance."""
    settings = garage.settings.override(horizon_days=args.horizon)
    cars = [garage.find_car(args.car)] if args.car else garage.active_cars

    if not cars:
        print("No active cars in garage.")
        return 0

    for car in cars:
        print_car_reminders(car, settings, args.today)
    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(maintenances: List[Maintenance]) -> List[List[str]]:
    """Convert maintenances to table rows."""
    rows = []
    for m in maintenances:
        rows.append(
            [
                m.date.isoformat() if m.date else "-",
                format_km(m.mileage),
                m.display_type,
                format_cost(m.cost),
                m.reminder.formatted_text if m.reminder else "-",
                truncate(m.notes, 30),
            ]
        )
    return rows


def cmd_history(args, garage):
    """View maintenance history of a car."""
    car = garage.find_car(args.car)

    if args.sort == "km":
        entries = sorted(car.maintenances, key=lambda m: m.mileage or 0, reverse=not args.asc)
    elif args.sort == "type":
        entries = sorted(
            car.maintenances,
            key=lambda m: (m.display_type, m.date or date.min),
            reverse=not args.asc,
        )
    else:
        entries = sorted(car.maintenances, key=lambda m: m.date or date.min, reverse=not args.asc)

    if args.type:
        entries = [m for m in entries if m.type == args.type]
    if args.since:
        since = parse_date(args.since)
        entries = [m for m in entries if m.date and m.date >= since]

    total_cost = sum(m.cost for m in entries)

    print(f"Car: {car.display_name}")
    print(f"Current km: {format_km(car.mileage)}")
    print(f"Total maintenances: {len(car.maintenances)}")
    if args.type or args.since:
        print(f"Showing: {len(entries)} (filtered)")
    if total_cost > 0:
        print(f"Total cost: {format_cost(total_cost)}")
    print()

    if not entries:
        print("No maintenance recorded.")
        return 0

    headers = ["Date", "Km", "Maintenance", "Cost", "Reminder", "Notes"]
    print(tabulate(make_history_table(entries), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Log command
# =============================================================================


def build_reminder(args) -> Optional[Reminder]:
    """Reminder requested on the command line, if any."""
    remind_date = parse_date(args.remind_date)
    if args.remind_every:
        value, unit = parse_interval(args.remind_every)
        return Reminder.every(value, unit)
    if remind_date and args.remind_km:
        return Reminder.date_or_mileage(remind_date, args.remind_km)
    if remind_date:
        return Reminder.on_date(remind_date)
    if args.remind_km:
        return Reminder.at_mileage(args.remind_km)
    if args.default_reminder:
        return Reminder.default_for(args.type)
    return None


def cmd_log(args, garage):
    """Record a maintenance."""
    car = garage.find_car(args.car)

    maintenance = Maintenance(
        args.type,
        parse_date(args.date) or args.today,
        mileage=args.km or 0,
        cost=args.cost or 0.0,
        notes=args.notes,
        custom_type=args.custom_type,
    )
    reminder = build_reminder(args)
    if reminder is not None:
        maintenance.attach_reminder(reminder)

    print(f"Adding maintenance to {car.display_name}:")
    print(f"  Type:     {maintenance.display_type}")
    print(f"  Date:     {maintenance.date.isoformat()}")
    if maintenance.mileage:
        print(f"  Km:       {format_km(maintenance.mileage)}")
    if maintenance.cost:
        print(f"  Cost:     {format_cost(maintenance.cost)}")
    if maintenance.notes:
        print(f"  Notes:    {maintenance.notes}")
    if reminder is not None:
        print(f"  Reminder: {reminder.formatted_text}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    scheduler = NotificationScheduler(OutboxDispatcher(args.outbox), garage.settings)
    garage.add_maintenance(car.id, maintenance, on_change=scheduler.on_change)
    save_garage(args.garage_file, garage)
    print("Maintenance saved.")
    return 0


# =============================================================================
# Update km command
# =============================================================================


def cmd_update_km(args, garage):
    """Update the odometer reading of a car."""
    car = garage.find_car(args.car)
    old_km = car.mileage

    print(f"Car: {car.display_name}")
    print(f"Current km: {format_km(old_km)}")
    print(f"New km:     {format_km(args.km)}")
    print()

    if args.km < old_km:
        print(f"Error: New reading is lower than current ({format_km(old_km)})")
        return 1

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    garage.update_mileage(car.id, args.km)
    save_garage(args.garage_file, garage)
    print("Km updated.")
    return 0


# =============================================================================
# Notify command
# =============================================================================


def cmd_notify(args, garage):
    """Cancel and reschedule all notifications of the selected cars."""
    scheduler = NotificationScheduler(OutboxDispatcher(args.outbox), garage.settings)
    cars = [garage.find_car(args.car)] if args.car else garage.active_cars

    rows = []
    for car in cars:
        for notification in scheduler.resync(car):
            rows.append(
                [
                    car.display_name,
                    notification.trigger.strftime("%Y-%m-%d %H:%M"),
                    truncate(notification.body, 60),
                ]
            )

    print(f"Outbox: {args.outbox}")
    print(f"Scheduled notifications: {len(rows)}")
    if rows:
        print()
        print(tabulate(rows, headers=["Car", "Trigger", "Message"], tablefmt="simple"))
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Car maintenance reminders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s garage.yaml cars
  %(prog)s garage.yaml reminders
  %(prog)s garage.yaml reminders --car AB123CD --horizon 90
  %(prog)s garage.yaml history --car AB123CD --type tagliando
  %(prog)s garage.yaml log --car AB123CD tagliando --km 58000 --cost 180 \\
      --remind-every "1 year"
  %(prog)s garage.yaml update-km --car AB123CD 58000
  %(prog)s garage.yaml notify --outbox notifications.yaml
""",
    )
    parser.add_argument("garage_file", type=Path, help="Path to garage YAML file")
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Compute as of this date (YYYY-MM-DD, default: today)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("cars", help="List cars in the garage")

    reminders_parser = subparsers.add_parser(
        "reminders", help="Show upcoming and overdue maintenance"
    )
    reminders_parser.add_argument("--car", type=str, help="Car id prefix, plate or name")
    reminders_parser.add_argument(
        "--horizon", type=int, help="Days ahead to look for predictions (default: 365)"
    )

    history_parser = subparsers.add_parser("history", help="View maintenance history")
    history_parser.add_argument("--car", type=str, required=True, help="Car id, plate or name")
    history_parser.add_argument(
        "--type", choices=[t.value for t in MaintenanceType], help="Filter by type"
    )
    history_parser.add_argument(
        "--since", type=str, help="Show only entries since date (YYYY-MM-DD)"
    )
    history_parser.add_argument(
        "--sort", choices=["date", "km", "type"], default="date", help="Sort order"
    )
    history_parser.add_argument(
        "--asc", action="store_true", help="Sort ascending instead of descending"
    )

    log_parser = subparsers.add_parser("log", help="Record a maintenance")
    log_parser.add_argument("type", choices=[t.value for t in MaintenanceType])
    log_parser.add_argument("--car", type=str, required=True, help="Car id, plate or name")
    log_parser.add_argument("--custom-type", type=str, help="Label for custom maintenance")
    log_parser.add_argument("--date", type=str, help="Date (YYYY-MM-DD, default: today)")
    log_parser.add_argument("--km", type=int, help="Odometer reading at service")
    log_parser.add_argument("--cost", type=float, help="Cost of the maintenance")
    log_parser.add_argument("--notes", type=str, help="Notes")
    log_parser.add_argument("--remind-date", type=str, help="Remind on date (YYYY-MM-DD)")
    log_parser.add_argument("--remind-km", type=int, help="Remind at odometer reading")
    log_parser.add_argument(
        "--remind-every", type=str, help="Remind after an interval (e.g. '6 months')"
    )
    log_parser.add_argument(
        "--default-reminder",
        action="store_true",
        help="Use the usual interval for this maintenance type",
    )
    log_parser.add_argument("--outbox", type=Path, default=Path(DEFAULT_OUTBOX))
    log_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    update_parser = subparsers.add_parser("update-km", help="Update odometer reading")
    update_parser.add_argument("km", type=int, help="Current odometer reading")
    update_parser.add_argument("--car", type=str, required=True, help="Car id, plate or name")
    update_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be updated without saving"
    )

    notify_parser = subparsers.add_parser("notify", help="Reschedule notifications")
    notify_parser.add_argument("--car", type=str, help="Car id prefix, plate or name")
    notify_parser.add_argument("--outbox", type=Path, default=Path(DEFAULT_OUTBOX))

    return parser


COMMANDS = {
    "cars": cmd_cars,
    "reminders": cmd_reminders,
    "history": cmd_history,
    "log": cmd_log,
    "update-km": cmd_update_km,
    "notify": cmd_notify,
}


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.garage_file.exists():
        print(f"Error: File not found: {args.garage_file}")
        return 1

    args.today = args.today or date.today()
    garage = load_garage(args.garage_file)

    try:
        return COMMANDS[args.command](args, garage)
    except (KeyError, ValueError) as e:
        message = e.args[0] if isinstance(e, KeyError) and e.args else e
        print(f"Error: {message}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
