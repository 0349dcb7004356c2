"""Scheduling and notification settings."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

# camelCase keys used in the `settings:` section of a garage file
_YAML_KEYS = {
    "horizon_days": "horizonDays",
    "advance_days": "advanceDays",
    "notification_hour": "notificationHour",
    "km_per_day": "kmPerDay",
    "locale": "locale",
}


@dataclass
class Settings:
    """User settings for reminder computation and notifications."""

    horizon_days: int = 365
    advance_days: int = 7  # notify this many days before the due date
    notification_hour: int = 10
    km_per_day: int = 50
    locale: str = "it"

    def __post_init__(self):
        if self.horizon_days <= 0:
            raise ValueError(f"horizon_days must be positive, got {self.horizon_days}")
        if self.advance_days < 0:
            raise ValueError(f"advance_days must be >= 0, got {self.advance_days}")
        if not 0 <= self.notification_hour <= 23:
            raise ValueError(f"notification_hour must be 0-23, got {self.notification_hour}")
        if self.km_per_day <= 0:
            raise ValueError(f"km_per_day must be positive, got {self.km_per_day}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Settings":
        """Build settings from a YAML `settings:` mapping; missing keys keep defaults."""
        data = data or {}
        kwargs = {}
        for name, key in _YAML_KEYS.items():
            value = data.get(key)
            if value is None:
                continue
            kwargs[name] = str(value) if name == "locale" else int(value)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to camelCase keys, omitting defaults."""
        defaults = Settings()
        d: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value != getattr(defaults, f.name):
                d[_YAML_KEYS[f.name]] = value
        return d

    def override(self, **changes) -> "Settings":
        """Copy with the given non-None values replaced (e.g. from CLI flags)."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in changes.items() if v is not None})
        return Settings(**values)
