"""Derive a person's displayable state from their latest activity events."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, Sequence

from .classifier import GENERIC_PROFILE, PersonProfile, is_screen_off_app
from .models import REFERENCE_TZ, ActivityEvent, DeviceKind, PersonState
from .normalization import first_segment

logger = logging.getLogger(__name__)

PHONE_KEYWORDS: tuple[str, ...] = ("phone", "android", "mobile", "iq13", "iqoo")
PC_STALE_AFTER = timedelta(hours=4)

DevicePredicate = Callable[[Optional[str]], bool]


def is_phone_machine(machine: Optional[str]) -> bool:
    """Keyword heuristic on the free-text device identifier."""
    if not machine:
        return False
    lowered = machine.lower()
    return any(keyword in lowered for keyword in PHONE_KEYWORDS)


def device_kind(machine: Optional[str], is_phone: DevicePredicate = is_phone_machine) -> DeviceKind:
    return DeviceKind.PHONE if is_phone(machine) else DeviceKind.DESKTOP


def app_name_from_event(event: Optional[ActivityEvent]) -> str:
    """First title segment of the window title, else of the app string."""
    if event is None:
        return ""
    return first_segment((event.window_title or "").strip()) or first_segment(
        (event.app or "").strip()
    )


def newest_first(events: Iterable[ActivityEvent]) -> list[ActivityEvent]:
    """Sort by access time descending; events without a time go last."""
    return sorted(
        events,
        key=lambda event: event.access_time.timestamp() if event.access_time else float("-inf"),
        reverse=True,
    )


def is_pc_stale(
    pc_event: Optional[ActivityEvent],
    now: datetime,
    max_age: timedelta = PC_STALE_AFTER,
) -> bool:
    if pc_event is None or pc_event.access_time is None:
        return True
    return now - pc_event.access_time > max_age


def is_asleep(
    phone_event: Optional[ActivityEvent],
    pc_event: Optional[ActivityEvent],
    now: datetime,
) -> bool:
    """Phone shows only a screen-off app and the desktop has gone quiet."""
    if phone_event is None:
        return False
    if not is_screen_off_app(app_name_from_event(phone_event)):
        return False
    return is_pc_stale(pc_event, now)


class ActivityInterpreter:
    """Pick the latest phone and desktop snapshot and decide asleep status."""

    def __init__(
        self,
        *,
        is_phone: DevicePredicate = is_phone_machine,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._is_phone = is_phone
        self._clock = clock or (lambda: datetime.now(REFERENCE_TZ))

    def interpret(
        self,
        name: str,
        events: Sequence[ActivityEvent],
        profile: PersonProfile = GENERIC_PROFILE,
    ) -> PersonState:
        if not events:
            return PersonState(name=name, has_events=False)

        ordered = newest_first(events)
        if profile.uses_fixed_machines:
            phone_event = _first(ordered, lambda e: e.machine == profile.phone_machine)
            pc_event = _first(ordered, lambda e: e.machine == profile.pc_machine)
        else:
            phone_event = _first(ordered, lambda e: self._is_phone(e.machine))
            pc_event = _first(ordered, lambda e: not self._is_phone(e.machine))

        asleep = is_asleep(phone_event, pc_event, self._clock())
        if asleep:
            logger.debug("%s looks asleep (phone screen off, desktop stale).", name)
        return PersonState(
            name=name,
            phone_event=phone_event,
            pc_event=pc_event,
            asleep=asleep,
        )


def _first(
    events: Iterable[ActivityEvent], predicate: Callable[[ActivityEvent], bool]
) -> Optional[ActivityEvent]:
    return next((event for event in events if predicate(event)), None)
