"""Command-line interface for the status service."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer

from .client import StatusClient
from .config import SpySettings, load_settings
from .errors import ConfigError
from .service import MODE_TODAY, Reply, StatusService

app = typer.Typer(help="Query tracked users' device activity.")


@app.callback(no_args_is_help=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        path_type=Path,
        help="Location of the spy-status YAML config.",
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    ctx.obj = {"config": config}


def _settings(ctx: typer.Context) -> SpySettings:
    config = (ctx.obj or {}).get("config")
    try:
        return load_settings(config)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}", err=True)
        raise typer.Exit(code=2) from exc


def _print_reply(reply: Optional[Reply]) -> None:
    if reply is None:
        typer.echo("No matching trigger.")
        raise typer.Exit(code=1)
    if reply.is_forward:
        typer.echo(f"# {reply.forward_title}")
        for block in reply.messages:
            typer.echo(block.rstrip("\n"))
            typer.echo("-" * 20)
    else:
        typer.echo(reply.text)


async def _run_message(settings: SpySettings, message: str) -> Optional[Reply]:
    async with StatusClient(settings.api_base, timeout=settings.timeout) as client:
        return await StatusService(settings, client).handle(message)


async def _run_today(settings: SpySettings, name: str) -> list[str]:
    async with StatusClient(settings.api_base, timeout=settings.timeout) as client:
        return await StatusService(settings, client).collect_blocks([name], MODE_TODAY)


@app.command()
def query(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Chat command, e.g. a person trigger."),
) -> None:
    """Handle one chat command and print the reply."""
    settings = _settings(ctx)
    _print_reply(asyncio.run(_run_message(settings, message)))


@app.command()
def today(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Tracked person name."),
) -> None:
    """Print today's usage breakdown for one person."""
    settings = _settings(ctx)
    for block in asyncio.run(_run_today(settings, name)):
        typer.echo(block.rstrip("\n"))


@app.command()
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the service."),
    port: int = typer.Option(
        8766, "--port", min=1, max=65535, help="TCP port for the service."
    ),
) -> None:
    """Run the chat-command HTTP endpoint."""
    from .server_runner import run_server

    run_server(host=host, port=port, settings=_settings(ctx))
