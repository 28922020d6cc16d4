"""FastAPI application that accepts chat commands and returns rendered replies."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict

from .cache import ReplyCache
from .client import StatusClient
from .config import SpySettings
from .service import StatusService

logger = logging.getLogger(__name__)


class CommandPayload(BaseModel):
    message: str

    model_config = ConfigDict(extra="forbid")


class CommandReply(BaseModel):
    matched: bool
    forward_title: Optional[str] = None
    messages: List[str] = []


def create_app(
    *,
    settings: Optional[SpySettings] = None,
    client: Optional[StatusClient] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_settings = settings or SpySettings()
    status_client = client or StatusClient(
        resolved_settings.api_base, timeout=resolved_settings.timeout
    )
    service = StatusService(
        resolved_settings,
        status_client,
        cache=ReplyCache(resolved_settings.cache_expire),
    )

    app = FastAPI(title="Spy Status", version="0.3.0")
    app.state.service = service

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await status_client.aclose()

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        current: SpySettings = request.app.state.service.settings
        return {
            "api_base": current.api_base,
            "persons": [
                {"name": p.name, "trigger": p.trigger, "api_base": current.api_base_for(p.name)}
                for p in current.persons
            ],
            "team_trigger": current.team_trigger,
            "team_names": current.team_names,
            "heartbeat_seconds": current.heartbeat_seconds,
        }

    @app.post("/api/command", response_model=CommandReply)
    async def command(payload: CommandPayload, request: Request) -> CommandReply:
        message = payload.message.strip()
        if not message:
            raise HTTPException(status_code=400, detail="message is required")
        reply = await request.app.state.service.handle(message)
        if reply is None:
            return CommandReply(matched=False)
        return CommandReply(
            matched=True,
            forward_title=reply.forward_title,
            messages=list(reply.messages),
        )

    return app
