"""Client configuration.

All settings live on ClientConfig with documented defaults. from_env()
fills endpoints and credentials from the standard Upstash variables:

    UPSTASH_REDIS_REST_URL     main REST endpoint
    UPSTASH_REDIS_REST_TOKEN   bearer token
    UPSTASH_REDIS_EDGE_URL     optional read-only edge endpoint
    UPSTASH_DISABLE_TELEMETRY  any non-empty value disables telemetry headers
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any

import httpx

from .backoff import DEFAULT_MAX_ATTEMPTS, BackoffFn, default_backoff
from .transport.base import LatencyLogger, TransportConfig

ENV_URL = "UPSTASH_REDIS_REST_URL"
ENV_TOKEN = "UPSTASH_REDIS_REST_TOKEN"
ENV_EDGE_URL = "UPSTASH_REDIS_EDGE_URL"
ENV_DISABLE_TELEMETRY = "UPSTASH_DISABLE_TELEMETRY"

DEFAULT_TIMEOUT = 30.0
DEFAULT_AUTO_PIPELINE_WINDOW = 0.05  # seconds


@dataclass
class ClientConfig:
    """Configuration for UpstashClient."""

    # Endpoints and credentials
    url: str = ""
    token: str = ""
    edge_url: str | None = None

    # Have the server base64-encode strings; they are decoded transparently
    enable_base64: bool = False
    disable_telemetry: bool = False

    # Retry on network failures (no HTTP response)
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff: BackoffFn = default_backoff

    timeout: float = DEFAULT_TIMEOUT
    http_client: httpx.AsyncClient | None = field(default=None, repr=False)

    # Coalesce concurrent send() calls into /pipeline requests
    enable_auto_pipelining: bool = False
    auto_pipeline_window: float = DEFAULT_AUTO_PIPELINE_WINDOW

    latency_logger: LatencyLogger | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.auto_pipeline_window < 0:
            raise ValueError("auto_pipeline_window cannot be negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> ClientConfig:
        """Build a config, falling back to environment variables.

        Explicit keyword arguments win over the environment.
        """
        config = cls(**overrides)
        updates: dict[str, Any] = {}
        if not config.url:
            updates["url"] = os.getenv(ENV_URL, "")
        if not config.token:
            updates["token"] = os.getenv(ENV_TOKEN, "")
        if not config.edge_url:
            updates["edge_url"] = os.getenv(ENV_EDGE_URL) or None
        if not config.disable_telemetry and os.getenv(ENV_DISABLE_TELEMETRY):
            updates["disable_telemetry"] = True
        return replace(config, **updates) if updates else config

    def to_transport_config(self) -> TransportConfig:
        """Derive the immutable settings the transport needs."""
        return TransportConfig(
            url=self.url,
            edge_url=self.edge_url,
            token=self.token,
            enable_base64=self.enable_base64,
            max_attempts=self.max_attempts,
            backoff=self.backoff,
            timeout=self.timeout,
            disable_telemetry=self.disable_telemetry,
            latency_logger=self.latency_logger,
        )
