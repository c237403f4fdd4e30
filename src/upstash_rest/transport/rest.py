"""HTTP transport for the Upstash REST API.

Handles:
- Read/write routing (reads go to the edge endpoint when configured)
- Retry with backoff when no HTTP response was obtained
- Envelope interpretation and optional base64 decoding
- Opening text/event-stream responses for pub/sub and monitor
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import platform
import time
from importlib import metadata
from typing import Any

import httpx

from ..envelope import unwrap
from ..errors import (
    DecodeError,
    MarshalError,
    RequestBuildError,
    ResponseStatusError,
    TransportError,
)
from ..values import Value
from .base import Request, TransportConfig, join_url

logger = logging.getLogger(__name__)

ENCODING_HEADER = "Upstash-Encoding"


def marshal_body(body: Any) -> bytes:
    """JSON-encode a request body.

    Raises:
        MarshalError: if the body holds values JSON cannot represent.
    """
    try:
        return json.dumps(body, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise MarshalError(f"unable to marshal request body: {e}") from e


def _sdk_version() -> str:
    try:
        return metadata.version("upstash-rest")
    except metadata.PackageNotFoundError:
        return "unknown"


def _detect_platform() -> str:
    if os.getenv("VERCEL"):
        return "vercel"
    if os.getenv("AWS_REGION"):
        return "aws"
    return "unknown"


def telemetry_headers() -> dict[str, str]:
    """Headers identifying the client to the server."""
    return {
        "Upstash-Telemetry-Sdk": f"upstash-rest-py@v{_sdk_version()}",
        "Upstash-Telemetry-Runtime": f"python@v{platform.python_version()}",
        "Upstash-Telemetry-Platform": _detect_platform(),
    }


class RestTransport:
    """Stateless HTTP transport; one request (plus retries) per call.

    Safe to share between concurrent tasks: the configuration is frozen and
    httpx.AsyncClient pools connections internally.
    """

    def __init__(
        self,
        config: TransportConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Endpoints, credentials and retry settings
            http_client: Externally managed client. When omitted the
                transport creates one and closes it in aclose().
        """
        self.config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(config.timeout))
        self._telemetry = {} if config.disable_telemetry else telemetry_headers()

    # =========================================================================
    # Public operations
    # =========================================================================

    async def read(self, request: Request) -> Value:
        """Issue a GET; routed to the edge endpoint when one is configured."""
        return await self._call("GET", self.config.read_url, request)

    async def write(self, request: Request) -> Value:
        """Issue a POST with the JSON body to the main endpoint."""
        return await self._call("POST", self.config.url, request)

    async def stream(self, request: Request) -> httpx.Response:
        """Open an event stream on the main endpoint.

        Not retried: a partially consumed stream cannot be replayed. The
        caller owns the returned response and must aclose() it.
        """
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Accept": "text/event-stream",
        }
        http_request = self._build(
            "GET",
            join_url(self.config.url, request.path),
            headers=headers,
            timeout=httpx.Timeout(self.config.timeout, read=None),  # No read timeout for SSE
        )

        try:
            response = await self._client.send(http_request, stream=True)
        except httpx.TransportError as e:
            raise TransportError(f"unable to perform stream request: {e}") from e

        if not response.is_success:
            await response.aclose()
            raise ResponseStatusError(
                f"stream request returned status code {response.status_code}",
                status_code=response.status_code,
                path=http_request.url.path,
            )

        logger.debug(f"Opened event stream {http_request.url.path}")
        return response

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> RestTransport:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    # =========================================================================
    # Request execution
    # =========================================================================

    async def _call(self, method: str, base_url: str, request: Request) -> Value:
        content = None
        if method == "POST" and request.body is not None:
            content = marshal_body(request.body)

        http_request = self._build(
            method,
            join_url(base_url, request.path),
            headers=self._headers(),
            content=content,
        )

        started = time.perf_counter()
        response = await self._send_with_retry(http_request, request.command_name)
        try:
            return self._interpret(response)
        finally:
            self._record_latency(request.command_name, time.perf_counter() - started)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Content-Type": "application/json",
        }
        if self.config.enable_base64:
            headers[ENCODING_HEADER] = "base64"
        headers.update(self._telemetry)
        return headers

    def _build(self, method: str, url: str, **kwargs: Any) -> httpx.Request:
        try:
            http_request = self._client.build_request(method, url, **kwargs)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise RequestBuildError(f"unable to create request: {e}") from e

        # httpx only rejects a missing scheme at send time, where it would
        # look like a retryable network failure.
        if http_request.url.scheme not in ("http", "https"):
            raise RequestBuildError(f"unable to create request: unsupported URL {url!r}")
        return http_request

    async def _send_with_retry(self, http_request: httpx.Request, command: str) -> httpx.Response:
        """Send, retrying only when no response was obtained at all.

        The sleep between attempts is a plain asyncio.sleep, so caller
        cancellation and asyncio.timeout deadlines interrupt it.
        """
        max_attempts = self.config.max_attempts
        last_error: httpx.TransportError | None = None

        for attempt in range(max_attempts):
            try:
                logger.debug(f"{http_request.method} {http_request.url.path} (attempt {attempt + 1})")
                return await self._client.send(http_request)
            except httpx.TransportError as e:
                last_error = e
                if attempt + 1 >= max_attempts:
                    break
                delay = self.config.backoff(attempt)
                logger.warning(
                    f"Request {command or http_request.url.path} failed: {e!r}. "
                    f"Retrying in {delay:.3f}s ({attempt + 1}/{max_attempts})"
                )
                await asyncio.sleep(delay)

        raise TransportError(
            f"unable to perform request after {max_attempts} attempts: {last_error}",
            attempts=max_attempts,
        ) from last_error

    def _interpret(self, response: httpx.Response) -> Value:
        if not response.is_success:
            raise self._status_error(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"unable to unmarshal response: {e}") from e

        return unwrap(payload, self.config.enable_base64)

    def _status_error(self, response: httpx.Response) -> ResponseStatusError:
        path = response.request.url.path
        try:
            body = response.json()
        except ValueError as e:
            reason = str(e)
            body = None
        else:
            reason = f"expected a JSON object, got {type(body).__name__}"

        if not isinstance(body, dict):
            return ResponseStatusError(
                f"unable to decode response body of bad response: "
                f"{response.status_code} {response.reason_phrase}: {reason}",
                status_code=response.status_code,
                body=response.text,
                path=path,
            )

        pretty = json.dumps(body, indent=2)
        return ResponseStatusError(
            f"response returned status code {response.status_code}: {pretty}, path: {path}",
            status_code=response.status_code,
            body=body,
            path=path,
        )

    def _record_latency(self, command: str, elapsed: float) -> None:
        if self.config.latency_logger is None:
            return
        try:
            self.config.latency_logger(command, elapsed)
        except Exception:
            logger.exception(f"Error in latency logger for {command}")
