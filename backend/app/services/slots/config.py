# backend/app/services/slots/config.py
"""
Booking policy: per-type slot catalog and quota limits.

The policy is persisted as a single `booking_settings` row and is only
reached through SettingsRepository, which callers pass explicitly into
the admission controller and the availability query.
"""

import json
import logging
import re
from dataclasses import dataclass, field, replace

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models.generated import BookingSettings as DBBookingSettings

logger = logging.getLogger(__name__)

SETTINGS_KEY = "system_settings"

SLOT_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d-([01]\d|2[0-3]):[0-5]\d$")

FALLBACK_SLOTS: tuple[str, ...] = (
    "08:00-09:00",
    "09:00-10:00",
    "10:00-11:00",
    "11:00-12:00",
    "13:00-14:00",
    "14:00-15:00",
    "15:00-16:00",
    "16:00-17:00",
)


def time_str_to_minutes(time_str: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = time_str.split(":")
    return int(hour) * 60 + int(minute)


@dataclass(frozen=True)
class ResourceTypeConfig:
    """A resource type and its ordered slot catalog."""
    value: str
    label: str
    icon: str = "grid"
    time_slots: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "label": self.label,
            "icon": self.icon,
            "time_slots": list(self.time_slots),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ResourceTypeConfig":
        return cls(
            value=data["value"],
            label=data.get("label") or data["value"],
            icon=data.get("icon") or "grid",
            time_slots=tuple(data.get("time_slots") or ()),
        )


DEFAULT_RESOURCE_TYPES: tuple[ResourceTypeConfig, ...] = (
    ResourceTypeConfig(
        value="laundry",
        label="Laundry",
        icon="droplet",
        time_slots=FALLBACK_SLOTS,
    ),
    ResourceTypeConfig(
        value="study_room",
        label="Study Room",
        icon="book",
        time_slots=FALLBACK_SLOTS + ("18:00-19:00", "19:00-20:00", "20:00-21:00"),
    ),
    ResourceTypeConfig(
        value="sports",
        label="Sports",
        icon="trophy",
        time_slots=(
            "17:00-18:00",
            "18:00-19:00",
            "19:00-20:00",
            "20:00-21:00",
            "21:00-22:00",
            "22:00-23:00",
        ),
    ),
)


@dataclass(frozen=True)
class BookingPolicy:
    """
    Snapshot of the booking configuration.

    Attributes:
        resource_types: Configured types with their slot catalogs
        daily_limit: Active bookings per user, type and date
        weekly_limit: Active bookings per user, type and Monday-Sunday week
        advance_booking_limit: Future-dated active bookings per user and type
    """
    resource_types: tuple[ResourceTypeConfig, ...] = DEFAULT_RESOURCE_TYPES
    daily_limit: int = 2
    weekly_limit: int = 4
    advance_booking_limit: int = 1
    fallback_slots: tuple[str, ...] = field(default=FALLBACK_SLOTS, compare=False)

    def __post_init__(self):
        """Validate limits."""
        for name in ("daily_limit", "weekly_limit", "advance_booking_limit"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    def find_type(self, value: str) -> ResourceTypeConfig | None:
        for rt in self.resource_types:
            if rt.value == value:
                return rt
        return None

    def slots_for_type(self, value: str) -> tuple[str, ...]:
        """Ordered catalog for a type; falls back to the default schedule."""
        rt = self.find_type(value)
        if rt and rt.time_slots:
            return rt.time_slots
        return self.fallback_slots

    def with_type(self, updated: ResourceTypeConfig) -> "BookingPolicy":
        """Return a copy with `updated` replacing the type of the same value."""
        types = tuple(updated if rt.value == updated.value else rt for rt in self.resource_types)
        return replace(self, resource_types=types)


class SettingsRepository:
    """get()/update() access to the persisted booking policy."""

    def __init__(self, db: Session):
        self.db = db

    def _find(self) -> DBBookingSettings | None:
        return (
            self.db.query(DBBookingSettings)
            .filter(DBBookingSettings.settings_key == SETTINGS_KEY)
            .first()
        )

    def _row(self) -> DBBookingSettings:
        row = self._find()
        if row is not None:
            return row

        row = DBBookingSettings(settings_key=SETTINGS_KEY)
        self._write(row, BookingPolicy())
        try:
            self.db.add(row)
            self.db.commit()
        except IntegrityError:
            # A concurrent first request created the row first
            self.db.rollback()
            logger.info("Booking settings row created concurrently, re-reading")
            return self._find()

        self.db.refresh(row)
        logger.info("Booking settings initialised with defaults")
        return row

    @staticmethod
    def _write(row: DBBookingSettings, policy: BookingPolicy) -> None:
        row.resource_types = json.dumps([rt.to_dict() for rt in policy.resource_types])
        row.daily_limit = policy.daily_limit
        row.weekly_limit = policy.weekly_limit
        row.advance_booking_limit = policy.advance_booking_limit

    def get(self) -> BookingPolicy:
        row = self._row()
        try:
            raw_types = json.loads(row.resource_types) if row.resource_types else []
        except json.JSONDecodeError:
            logger.warning("booking_settings.resource_types is not valid JSON, using empty catalog")
            raw_types = []

        return BookingPolicy(
            resource_types=tuple(ResourceTypeConfig.from_dict(t) for t in raw_types),
            daily_limit=row.daily_limit,
            weekly_limit=row.weekly_limit,
            advance_booking_limit=row.advance_booking_limit,
        )

    def update(self, policy: BookingPolicy) -> BookingPolicy:
        row = self._row()
        self._write(row, policy)
        self.db.commit()
        return policy
