"""Domain models for observed device activity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

REFERENCE_TZ = timezone(timedelta(hours=8))
UNKNOWN_APP = "unknown"


class DeviceKind(str, Enum):
    PHONE = "phone"
    DESKTOP = "desktop"


@dataclass(slots=True, frozen=True)
class ActivityEvent:
    """One snapshot reported by a monitored device."""

    machine: str
    window_title: Optional[str]
    app: Optional[str]
    access_time: Optional[datetime]

    @property
    def title(self) -> str:
        """Window title, falling back to the app string."""
        return (self.window_title or self.app or "").strip()


class TitleKind(str, Enum):
    MUSIC = "music"
    BROWSER = "browser"
    PLAIN = "plain"


@dataclass(slots=True, frozen=True)
class ClassifiedTitle:
    kind: TitleKind
    app: str
    song: Optional[str] = None
    page_title: Optional[str] = None


class AppKind(str, Enum):
    NOISE = "noise"
    SCREEN_OFF = "screen_off"
    KNOWN = "known"
    GENERIC = "generic"


@dataclass(slots=True, frozen=True)
class AppCategory:
    kind: AppKind
    text: Optional[str] = None

    @property
    def is_noise(self) -> bool:
        return self.kind in (AppKind.NOISE, AppKind.SCREEN_OFF)


@dataclass(slots=True)
class PersonState:
    """Latest phone and desktop snapshots for a single person."""

    name: str
    phone_event: Optional[ActivityEvent] = None
    pc_event: Optional[ActivityEvent] = None
    asleep: bool = False
    has_events: bool = True


@dataclass(slots=True)
class AppUsageBucket:
    app_name: str
    heartbeat_count: int
    seconds: int
    percent: float = 0.0


@dataclass(slots=True)
class DailyReport:
    person_name: str
    elapsed_seconds: int
    per_device: dict[DeviceKind, list[AppUsageBucket]] = field(default_factory=dict)
    covered_seconds: dict[DeviceKind, int] = field(default_factory=dict)
    total_percent: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not any(self.per_device.get(kind) for kind in DeviceKind)
