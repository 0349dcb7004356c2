"""Urgency enum for reminder events."""

from enum import Enum


class Urgency(Enum):
    """Reminder urgency categories. Lower value = more urgent."""

    OVERDUE = 1
    HIGH = 2  # due within 30 days
    MEDIUM = 3  # due within 90 days
    LOW = 4  # further out, or no day estimate

    @classmethod
    def from_days(cls, is_due: bool, days_until_due) -> "Urgency":
        if is_due:
            return cls.OVERDUE
        if days_until_due is None:
            return cls.LOW
        if days_until_due <= 30:
            return cls.HIGH
        if days_until_due <= 90:
            return cls.MEDIUM
        return cls.LOW
