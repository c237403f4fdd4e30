"""Transport layer.

RestTransport turns Requests into HTTP calls and decoded results;
MessageStream reads the event streams behind SUBSCRIBE and MONITOR.
"""

from .base import Request, Transport, TransportConfig
from .rest import RestTransport, marshal_body, telemetry_headers
from .sse import MessageStream, parse_data_line

__all__ = [
    "Request",
    "Transport",
    "TransportConfig",
    "RestTransport",
    "MessageStream",
    "marshal_body",
    "parse_data_line",
    "telemetry_headers",
]
