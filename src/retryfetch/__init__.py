"""retryfetch - HTTP fetch with retry and backoff"""

from retryfetch.application.fetch_service import FetchService
from retryfetch.domain.config import RetryConfig
from retryfetch.domain.errors import PayloadParseError, RetryFetchError, TerminalError, TransportFault
from retryfetch.domain.models.request import RequestDescriptor
from retryfetch.infrastructure.retry import execute, execute_async

__all__ = [
    "FetchService",
    "PayloadParseError",
    "RequestDescriptor",
    "RetryConfig",
    "RetryFetchError",
    "TerminalError",
    "TransportFault",
    "execute",
    "execute_async",
]
