"""Shared helpers for spy-status tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from spy_status.errors import FetchError
from spy_status.models import REFERENCE_TZ, ActivityEvent

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=REFERENCE_TZ)


def make_event(
    machine: str,
    window_title: Optional[str] = None,
    *,
    app: Optional[str] = None,
    ago: timedelta = timedelta(minutes=1),
    at: Optional[datetime] = None,
) -> ActivityEvent:
    """Build an ActivityEvent relative to ``NOW``."""
    return ActivityEvent(
        machine=machine,
        window_title=window_title,
        app=app,
        access_time=at if at is not None else NOW - ago,
    )


class FakeClient:
    """Stands in for StatusClient with canned events per name."""

    def __init__(self, events=None, names=None, failing=(), names_error=False) -> None:
        self.events = events or {}
        self.names = names or []
        self.failing = set(failing)
        self.names_error = names_error
        self.calls: list[tuple[str, str, Optional[str]]] = []
        self.closed = False

    async def aclose(self) -> None:
        self.closed = True

    async def list_names(self) -> list[str]:
        if self.names_error:
            raise FetchError("获取名单失败")
        return list(self.names)

    async def fetch_recent_events(self, name, limit=5, api_base=None):
        self.calls.append(("recent", name, api_base))
        if name in self.failing:
            raise FetchError("请求失败: HTTP 500")
        return self.events.get(name, [])

    async def fetch_today_events(self, name, api_base=None):
        self.calls.append(("today", name, api_base))
        if name in self.failing:
            raise FetchError("请求超时")
        return self.events.get(name, [])

    async def __aenter__(self) -> "FakeClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
