"""Aggregate a day of heartbeat snapshots into per-app usage."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .interpreter import DevicePredicate, device_kind, is_phone_machine
from .models import (
    REFERENCE_TZ,
    UNKNOWN_APP,
    ActivityEvent,
    AppUsageBucket,
    DailyReport,
    DeviceKind,
    TitleKind,
)
from .normalization import classify_title, first_segment, strip_leading_noise

DAY = timedelta(days=1)


def start_of_day(value: datetime) -> datetime:
    """Midnight of ``value``'s date in the reference time zone."""
    local = value.astimezone(REFERENCE_TZ) if value.tzinfo else value.replace(tzinfo=REFERENCE_TZ)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def usage_key(event: ActivityEvent, kind: DeviceKind) -> str:
    """App name an event is tallied under."""
    raw = event.title
    classified = classify_title(raw)
    if classified.kind is TitleKind.MUSIC:
        name = strip_leading_noise(classified.app).strip()
    elif kind is DeviceKind.PHONE:
        name = strip_leading_noise(first_segment(raw)).strip()
    elif classified.kind is TitleKind.BROWSER:
        name = classified.app
    else:
        name = first_segment(raw)
    return name or UNKNOWN_APP


class DailyAggregator:
    """Turns today's snapshots into ranked per-device app buckets."""

    def __init__(self, heartbeat_seconds: int, *, is_phone: DevicePredicate = is_phone_machine) -> None:
        if heartbeat_seconds <= 0:
            raise ValueError("heartbeat_seconds must be a positive integer")
        self.heartbeat_seconds = int(heartbeat_seconds)
        self._is_phone = is_phone

    def aggregate(
        self,
        name: str,
        events: Iterable[ActivityEvent],
        *,
        now: datetime,
        day_start: Optional[datetime] = None,
    ) -> DailyReport:
        day_start = day_start if day_start is not None else start_of_day(now)
        day_end = day_start + DAY
        elapsed = max(1, int((now - day_start).total_seconds()))

        counters: dict[DeviceKind, Counter[str]] = {kind: Counter() for kind in DeviceKind}
        for event in events:
            if event.access_time is None or not day_start <= event.access_time < day_end:
                continue
            kind = device_kind(event.machine, self._is_phone)
            counters[kind][usage_key(event, kind)] += 1

        report = DailyReport(person_name=name, elapsed_seconds=elapsed)
        for kind, counter in counters.items():
            covered = sum(counter.values()) * self.heartbeat_seconds
            report.covered_seconds[kind] = covered
            report.per_device[kind] = self._buckets(counter, covered)

        total_covered = sum(report.covered_seconds.values())
        report.total_percent = round(min(100.0, total_covered / elapsed * 100), 1)
        return report

    def _buckets(self, counter: Counter[str], covered: int) -> list[AppUsageBucket]:
        buckets = [
            AppUsageBucket(
                app_name=app,
                heartbeat_count=count,
                seconds=count * self.heartbeat_seconds,
            )
            for app, count in counter.items()
        ]
        buckets.sort(key=lambda bucket: bucket.seconds, reverse=True)
        for bucket in buckets:
            bucket.percent = round(bucket.seconds / covered * 100, 1) if covered else 0.0
        return buckets


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
