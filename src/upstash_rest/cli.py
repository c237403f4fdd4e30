"""Upstash REST CLI.

Endpoints and credentials default to the UPSTASH_REDIS_REST_URL,
UPSTASH_REDIS_REST_TOKEN and UPSTASH_REDIS_EDGE_URL environment variables.

Usage:
    upstash-rest ping                     # Check connectivity
    upstash-rest send SET greeting hello  # Run any command
    upstash-rest send GET greeting        # Result is printed as JSON
    upstash-rest subscribe news           # Print messages until Ctrl+C
    upstash-rest monitor                  # Print every processed command
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import click

from .client import UpstashClient
from .config import ClientConfig
from .errors import UpstashError
from .transport import MessageStream


def _json_default(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _format_result(result: Any) -> str:
    """Render a result for display: bare strings as-is, everything else as JSON."""
    if isinstance(result, str):
        return result
    return json.dumps(result, indent=2, default=_json_default)


def _build_client(ctx: click.Context) -> UpstashClient:
    config: ClientConfig = ctx.obj["config"]
    if not config.url or not config.token:
        click.echo(
            "Missing endpoint or token. Set UPSTASH_REDIS_REST_URL and "
            "UPSTASH_REDIS_REST_TOKEN, or pass --url and --token.",
            err=True,
        )
        sys.exit(1)
    return UpstashClient(config)


def _run(coro: Any) -> None:
    """Run a command coroutine, reporting client errors on stderr."""
    try:
        asyncio.run(coro)
    except UpstashError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nStopped", err=True)


@click.group()
@click.option("--url", default="", help="REST endpoint (default: $UPSTASH_REDIS_REST_URL)")
@click.option("--token", default="", help="Bearer token (default: $UPSTASH_REDIS_REST_TOKEN)")
@click.option("--edge-url", default=None, help="Read-only edge endpoint (default: $UPSTASH_REDIS_EDGE_URL)")
@click.option("--base64", "enable_base64", is_flag=True, help="Request base64-encoded responses")
@click.option("--verbose", "-v", is_flag=True, help="Log requests to stderr")
@click.pass_context
def main(
    ctx: click.Context,
    url: str,
    token: str,
    edge_url: str | None,
    enable_base64: bool,
    verbose: bool,
) -> None:
    """Talk to an Upstash Redis database over its REST API."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    ctx.ensure_object(dict)
    ctx.obj["config"] = ClientConfig.from_env(
        url=url,
        token=token,
        edge_url=edge_url,
        enable_base64=enable_base64,
    )


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("command")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def send(ctx: click.Context, command: str, args: tuple[str, ...]) -> None:
    """Send COMMAND with ARGS and print the result.

    Examples:

        upstash-rest send SET greeting hello

        upstash-rest send HGETALL user:1

        upstash-rest send LRANGE queue 0 -1
    """

    client = _build_client(ctx)

    async def execute() -> None:
        async with client:
            result = await client.send(command.upper(), *args)
        click.echo(_format_result(result))

    _run(execute())


@main.command()
@click.argument("message", required=False)
@click.pass_context
def ping(ctx: click.Context, message: str | None) -> None:
    """Check that the database answers."""

    client = _build_client(ctx)

    async def execute() -> None:
        async with client:
            click.echo(await client.ping(message))

    _run(execute())


async def _print_messages(stream: MessageStream) -> None:
    async with stream:
        async for message in stream:
            click.echo(message)


@main.command()
@click.argument("channel")
@click.pass_context
def subscribe(ctx: click.Context, channel: str) -> None:
    """Print messages published to CHANNEL until interrupted."""

    client = _build_client(ctx)

    async def execute() -> None:
        async with client:
            click.echo(f"Subscribed to {channel}", err=True)
            await _print_messages(await client.subscribe(channel))

    _run(execute())


@main.command()
@click.pass_context
def monitor(ctx: click.Context) -> None:
    """Print every command the server processes until interrupted."""

    client = _build_client(ctx)

    async def execute() -> None:
        async with client:
            await _print_messages(await client.monitor())

    _run(execute())


if __name__ == "__main__":
    main()
