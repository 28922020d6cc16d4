"""Route chat commands to status lookups and package the replies."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .cache import ReplyCache
from .client import StatusClient
from .config import SpySettings
from .errors import FetchError
from .interpreter import ActivityInterpreter
from .models import REFERENCE_TZ
from .rendering import PersonRenderer, render_error
from .reporting import DailyAggregator

logger = logging.getLogger(__name__)

MODE_STATUS = "status"
MODE_TODAY = "today"


@dataclass(slots=True, frozen=True)
class Reply:
    """Either one text reply or a forwarded bundle with a title.

    Cached replies are shared between callers, so the messages are a tuple.
    """

    messages: tuple[str, ...] = ()
    forward_title: Optional[str] = None

    @property
    def is_forward(self) -> bool:
        return self.forward_title is not None

    @property
    def text(self) -> str:
        return "\n".join(self.messages)


@dataclass(slots=True, frozen=True)
class Command:
    trigger: str
    mode: str


class StatusService:
    """Handles one incoming command at a time against the status API."""

    def __init__(
        self,
        settings: SpySettings,
        client: StatusClient,
        *,
        cache: Optional[ReplyCache] = None,
        interpreter: Optional[ActivityInterpreter] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.cache = cache if cache is not None else ReplyCache(settings.cache_expire)
        self._clock = clock or (lambda: datetime.now(REFERENCE_TZ))
        self.interpreter = interpreter or ActivityInterpreter(clock=self._clock)
        self.aggregator = DailyAggregator(settings.heartbeat_seconds)
        self._pattern = self._build_pattern()

    def _triggers(self) -> list[str]:
        triggers = [p.trigger for p in self.settings.persons if p.trigger]
        triggers.extend([self.settings.team_trigger, self.settings.all_trigger])
        return [t for t in triggers if t]

    def _build_pattern(self) -> re.Pattern[str]:
        alternatives = "|".join(
            re.escape(t) for t in sorted(set(self._triggers()), key=len, reverse=True)
        )
        suffix = re.escape(self.settings.today_suffix) if self.settings.today_suffix else None
        suffix_group = f"({suffix})?" if suffix else "()"
        return re.compile(rf"^({alternatives})\s*{suffix_group}\s*$")

    def parse(self, message: str) -> Optional[Command]:
        match = self._pattern.match((message or "").strip())
        if not match:
            return None
        return Command(trigger=match.group(1), mode=MODE_TODAY if match.group(2) else MODE_STATUS)

    def names_for_trigger(self, trigger: str) -> Optional[list[str]]:
        """Names for a person or team trigger; None for the all trigger."""
        if trigger == self.settings.all_trigger:
            return None
        if trigger == self.settings.team_trigger:
            return list(self.settings.team_names)
        return [p.name for p in self.settings.persons if p.trigger == trigger]

    async def handle(self, message: str) -> Optional[Reply]:
        command = self.parse(message)
        if command is None:
            logger.debug("Ignoring unmatched message %r", message)
            return None

        is_all = command.trigger == self.settings.all_trigger
        is_team = command.trigger == self.settings.team_trigger
        if is_all:
            try:
                names = await self.client.list_names()
            except FetchError as exc:
                logger.error("Failed to fetch the name list: %s", exc)
                return Reply(
                    (f"获取所有人名单失败，请确认服务端已启动且 {self.settings.api_base} 可访问。",)
                )
            if not names:
                return Reply(("服务端当前没有任何已配置的用户。",))
        else:
            names = self.names_for_trigger(command.trigger) or []
        if not names:
            logger.warning("No names configured for trigger %r", command.trigger)
            return None

        cache_key = self.cache.key_for(names, command.mode)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Reply cache hit for %s", cache_key)
            return cached

        blocks = await self.collect_blocks(names, command.mode)
        if is_all or is_team:
            title = self.settings.all_forward_title if is_all else self.settings.team_forward_title
            intro = [self.settings.team_intro] if is_team and self.settings.team_intro else []
            reply = Reply(tuple(intro + blocks), forward_title=title)
        else:
            reply = Reply(("".join(blocks).strip() or "暂无数据",))
        self.cache.put(cache_key, reply)
        return reply

    async def collect_blocks(self, names: list[str], mode: str = MODE_STATUS) -> list[str]:
        render = self.status_block if mode == MODE_STATUS else self.today_block
        return list(await asyncio.gather(*(self._isolated(render, name) for name in names)))

    async def _isolated(self, render: Callable, name: str) -> str:
        try:
            return await render(name)
        except FetchError as exc:
            logger.warning("Lookup failed for %s: %s", name, exc)
            return render_error(name, str(exc))

    async def status_block(self, name: str) -> str:
        events = await self.client.fetch_recent_events(
            name, self.settings.per_person_limit, self.settings.api_base_for(name)
        )
        profile = self.settings.profile_for(name)
        state = self.interpreter.interpret(name, events, profile)
        return PersonRenderer(profile).render_state(state)

    async def today_block(self, name: str) -> str:
        events = await self.client.fetch_today_events(name, self.settings.api_base_for(name))
        report = self.aggregator.aggregate(name, events, now=self._clock())
        return PersonRenderer(self.settings.profile_for(name)).render_daily(report)
