"""Upstash Redis REST client.

UpstashClient is the public facade. Commands are grouped by data type and
reached through properties, or sent raw with send():

    async with create_client() as client:
        await client.strings.set("greeting", "hello")
        print(await client.strings.get("greeting"))

        pipe = client.pipeline().push("INCR", "hits").push("GET", "hits")
        results = await pipe.exec()

        async with await client.subscribe("news") as messages:
            async for message in messages:
                print(message)
"""

from __future__ import annotations

import logging
from typing import Any

from .commands import (
    BitmapAPI,
    GeoAPI,
    HashAPI,
    HyperLogLogAPI,
    JsonAPI,
    KeyAPI,
    ListAPI,
    ScriptAPI,
    ServerAPI,
    SetAPI,
    SortedSetAPI,
    StreamAPI,
    StringAPI,
)
from .config import ClientConfig
from .pipeline import AutoPipeliner, Multi, Pipeline
from .transport import MessageStream, Request, RestTransport, Transport
from .values import Value, as_int, as_list, as_str

logger = logging.getLogger(__name__)


class UpstashClient:
    """Async client for the Upstash Redis REST API."""

    def __init__(self, config: ClientConfig | None = None, transport: Transport | None = None) -> None:
        """Initialize the client.

        Args:
            config: Client settings. Defaults to ClientConfig.from_env().
            transport: Transport to use instead of building a RestTransport
                from the config. The client still closes it on aclose().
        """
        self.config = config or ClientConfig.from_env()
        self._transport: Transport = transport or RestTransport(
            self.config.to_transport_config(), http_client=self.config.http_client
        )
        self._auto_pipeliner: AutoPipeliner | None = None
        if self.config.enable_auto_pipelining:
            self._auto_pipeliner = AutoPipeliner(self._transport, window=self.config.auto_pipeline_window)

    @property
    def transport(self) -> Transport:
        """Access the underlying transport."""
        return self._transport

    # =========================================================================
    # Raw access
    # =========================================================================

    async def send(self, command: str, *args: Any) -> Value:
        """Send one command as a POST body and return its decoded result."""
        if self._auto_pipeliner is not None:
            return await self._auto_pipeliner.send(command, *args)
        return await self._transport.write(Request.command(command, *args))

    async def read(self, *path: Any) -> Value:
        """Send a read-only command encoded as URL path segments."""
        return await self._transport.read(Request.segments(*path))

    # =========================================================================
    # Batching and transactions
    # =========================================================================

    def pipeline(self) -> Pipeline:
        return Pipeline(self._transport)

    def multi(self) -> Multi:
        return Multi(self._transport)

    def tx(self) -> Multi:
        """Alias for multi()."""
        return self.multi()

    async def watch(self, *keys: str) -> str:
        return as_str(await self.send("WATCH", *keys), "WATCH")

    async def unwatch(self) -> str:
        return as_str(await self.send("UNWATCH"), "UNWATCH")

    # =========================================================================
    # Pub/sub and monitoring
    # =========================================================================

    async def subscribe(self, channel: str) -> MessageStream:
        """Subscribe to a channel.

        The returned stream is already reading; close it (or use it as an
        async context manager) to end the subscription.
        """
        response = await self._transport.stream(Request.segments("subscribe", channel))
        return MessageStream(response).start()

    async def monitor(self) -> MessageStream:
        """Stream every command the server processes."""
        response = await self._transport.stream(Request.segments("monitor"))
        return MessageStream(response).start()

    async def publish(self, channel: str, message: Any) -> int:
        """Publish a message; returns the number of receiving subscribers."""
        return as_int(await self.send("PUBLISH", channel, message), "PUBLISH")

    async def pubsub(self, subcommand: str, *args: Any) -> Value:
        """Raw PUBSUB introspection, e.g. pubsub("CHANNELS", "news.*")."""
        return await self.send("PUBSUB", subcommand, *args)

    async def unsubscribe(self, *channels: str) -> list[Any]:
        return as_list(await self.send("UNSUBSCRIBE", *channels), "UNSUBSCRIBE")

    # =========================================================================
    # Connection
    # =========================================================================

    async def ping(self, message: str | None = None) -> str:
        args = [] if message is None else [message]
        return as_str(await self.send("PING", *args), "PING")

    async def echo(self, message: str) -> str:
        return as_str(await self.send("ECHO", message), "ECHO")

    # =========================================================================
    # Command groups
    # =========================================================================

    @property
    def strings(self) -> StringAPI:
        return StringAPI(_client=self)

    @property
    def keys(self) -> KeyAPI:
        return KeyAPI(_client=self)

    @property
    def hashes(self) -> HashAPI:
        return HashAPI(_client=self)

    @property
    def lists(self) -> ListAPI:
        return ListAPI(_client=self)

    @property
    def sets(self) -> SetAPI:
        return SetAPI(_client=self)

    @property
    def zsets(self) -> SortedSetAPI:
        """Sorted set operations."""
        return SortedSetAPI(_client=self)

    @property
    def hyperloglog(self) -> HyperLogLogAPI:
        return HyperLogLogAPI(_client=self)

    @property
    def bitmaps(self) -> BitmapAPI:
        return BitmapAPI(_client=self)

    @property
    def scripts(self) -> ScriptAPI:
        """Lua scripts and functions."""
        return ScriptAPI(_client=self)

    @property
    def streams(self) -> StreamAPI:
        return StreamAPI(_client=self)

    @property
    def json(self) -> JsonAPI:
        """RedisJSON operations."""
        return JsonAPI(_client=self)

    @property
    def geo(self) -> GeoAPI:
        return GeoAPI(_client=self)

    @property
    def server(self) -> ServerAPI:
        return ServerAPI(_client=self)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def aclose(self) -> None:
        """Flush auto-pipelined commands, then close the transport."""
        if self._auto_pipeliner is not None:
            await self._auto_pipeliner.aclose()
        await self._transport.aclose()

    async def __aenter__(self) -> UpstashClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()


def create_client(**overrides: Any) -> UpstashClient:
    """Create a client configured from the environment.

    Args:
        **overrides: ClientConfig fields that take precedence over the
            UPSTASH_* environment variables.

    Returns:
        UpstashClient owning its HTTP client (unless http_client is given)
    """
    config = ClientConfig.from_env(**overrides)
    logger.debug(f"Creating client for {config.url or '<unset url>'}")
    return UpstashClient(config)
