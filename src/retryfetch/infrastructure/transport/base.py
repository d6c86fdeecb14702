"""Base transport interfaces"""

from __future__ import annotations

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from retryfetch.domain.errors import PayloadParseError
from retryfetch.domain.models.request import RequestDescriptor


@dataclass
class TransportResponse:
    """Response as seen by the retry loop"""

    status_code: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)
    message: Optional[str] = None  # Explicit error message supplied by the server

    @property
    def ok(self) -> bool:
        """Check if status is 2xx"""
        return 200 <= self.status_code < 300

    def payload(self) -> Any:
        """Decode the body as JSON

        Raises:
            PayloadParseError: If the body is not valid JSON
        """
        try:
            return json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise PayloadParseError(
                f"Invalid JSON in response body (HTTP {self.status_code}): {e}",
                status_code=self.status_code,
            ) from e


class Transport(ABC):
    """Abstract base class for transports"""

    @abstractmethod
    def send(self, request: RequestDescriptor) -> TransportResponse:
        """Send one request

        Args:
            request: What to send

        Returns:
            Response, whatever its status

        Raises:
            TransportFault: If no response could be obtained
        """
        pass

    def close(self) -> None:
        """Release resources held by the transport"""
        pass


class AsyncTransport(ABC):
    """Abstract base class for transports used by the async retry loop"""

    @abstractmethod
    async def send(self, request: RequestDescriptor) -> TransportResponse:
        pass


class ThreadedAsyncTransport(AsyncTransport):
    """Runs a blocking transport in a worker thread"""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def send(self, request: RequestDescriptor) -> TransportResponse:
        return await asyncio.to_thread(self.transport.send, request)
