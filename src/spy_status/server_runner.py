"""Helpers to launch the command web service."""

from __future__ import annotations

import logging
from typing import Optional

import uvicorn

from .config import SpySettings
from .webapp import create_app


def run_server(
    *,
    host: str = "127.0.0.1",
    port: int = 8766,
    settings: Optional[SpySettings] = None,
    log_level: str = "info",
) -> None:
    """Start the FastAPI command endpoint."""
    app = create_app(settings=settings or SpySettings())
    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)
