"""Transports"""

from retryfetch.infrastructure.transport.base import (
    AsyncTransport,
    ThreadedAsyncTransport,
    Transport,
    TransportResponse,
)
from retryfetch.infrastructure.transport.mock import MockTransport, json_response
from retryfetch.infrastructure.transport.requests_transport import RequestsTransport

__all__ = [
    "AsyncTransport",
    "MockTransport",
    "RequestsTransport",
    "ThreadedAsyncTransport",
    "Transport",
    "TransportResponse",
    "json_response",
]
