"""Async client for the remote activity status API."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx

from .errors import FetchError
from .models import REFERENCE_TZ, ActivityEvent

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp or epoch milliseconds; naive values are UTC+8."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=REFERENCE_TZ)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable access_time %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=REFERENCE_TZ)
    return parsed


def event_from_payload(payload: dict[str, Any]) -> ActivityEvent:
    return ActivityEvent(
        machine=str(payload.get("machine") or ""),
        window_title=payload.get("window_title"),
        app=payload.get("app"),
        access_time=parse_timestamp(payload.get("access_time")),
    )


class StatusClient:
    """Fetches names and events with a fixed timeout.

    Timeouts and HTTP error statuses both surface as ``FetchError``.
    """

    def __init__(
        self,
        api_base: str,
        *,
        timeout: timedelta = timedelta(seconds=10),
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout.total_seconds(),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "StatusClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def list_names(self) -> list[str]:
        try:
            data = await self._get_json(self.api_base, "/api/names")
        except FetchError as exc:
            raise FetchError("获取名单失败") from exc
        names = data.get("names") if isinstance(data, dict) else None
        return [str(name) for name in names] if isinstance(names, list) else []

    async def fetch_recent_events(
        self, name: str, limit: int = 5, api_base: Optional[str] = None
    ) -> list[ActivityEvent]:
        data = await self._get_json(
            api_base or self.api_base,
            "/api/current-status",
            {"name": name, "limit": limit},
        )
        return self._events(data)

    async def fetch_today_events(
        self, name: str, api_base: Optional[str] = None
    ) -> list[ActivityEvent]:
        data = await self._get_json(api_base or self.api_base, "/api/today-events", {"name": name})
        return self._events(data)

    @staticmethod
    def _events(data: Any) -> list[ActivityEvent]:
        if not isinstance(data, list):
            return []
        return [event_from_payload(item) for item in data if isinstance(item, dict)]

    async def _get_json(
        self, base: str, path: str, params: Optional[dict[str, Any]] = None
    ) -> Any:
        url = f"{base.rstrip('/')}{path}"
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise FetchError("请求超时") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"请求失败: {exc}") from exc
        if not response.is_success:
            raise FetchError(f"请求失败: HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise FetchError("请求失败: 响应不是有效的 JSON") from exc
