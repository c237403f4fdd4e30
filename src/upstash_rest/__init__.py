"""Async client for the Upstash Redis REST API.

Provides:
- UpstashClient: command facade grouped by data type
- Pipeline / Multi: batched and transactional execution
- MessageStream: pub/sub and monitor event streams
- RestTransport: the HTTP layer, usable on its own
"""

from .backoff import constant_backoff, default_backoff, no_backoff
from .client import UpstashClient, create_client
from .config import ClientConfig
from .errors import (
    DecodeError,
    MarshalError,
    RequestBuildError,
    ResponseError,
    ResponseStatusError,
    TransportError,
    TypeMismatchError,
    UpstashError,
)
from .pipeline import AutoPipeliner, Multi, Pipeline
from .transport import MessageStream, Request, RestTransport, Transport, TransportConfig
from .types import KV, GeoLocation, GetExOptions, ScanOptions, ScanResult, SetOptions, StreamMessage

__version__ = "0.1.0"

__all__ = [
    # Client
    "UpstashClient",
    "ClientConfig",
    "create_client",
    # Batching
    "Pipeline",
    "Multi",
    "AutoPipeliner",
    # Transport
    "Transport",
    "TransportConfig",
    "RestTransport",
    "Request",
    "MessageStream",
    # Retry policies
    "default_backoff",
    "constant_backoff",
    "no_backoff",
    # Models
    "KV",
    "SetOptions",
    "GetExOptions",
    "ScanOptions",
    "ScanResult",
    "StreamMessage",
    "GeoLocation",
    # Errors
    "UpstashError",
    "MarshalError",
    "RequestBuildError",
    "TransportError",
    "ResponseStatusError",
    "ResponseError",
    "DecodeError",
    "TypeMismatchError",
]
