"""Transport built on requests"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from retryfetch.domain.errors import TransportFault
from retryfetch.domain.models.request import RequestDescriptor
from retryfetch.infrastructure.transport.base import Transport, TransportResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _extract_message(resp: requests.Response) -> Optional[str]:
    """Pull a "message" string out of a JSON error body, if there is one"""
    if resp.ok:
        return None
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


class RequestsTransport(Transport):
    """Sends requests through a requests.Session"""

    def __init__(self, session: Optional[requests.Session] = None, default_timeout: float = DEFAULT_TIMEOUT):
        """Initialize transport

        Args:
            session: Session to reuse (a new one is created if None)
            default_timeout: Timeout in seconds when the request has none
        """
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.default_timeout = default_timeout

    def send(self, request: RequestDescriptor) -> TransportResponse:
        timeout = request.timeout if request.timeout is not None else self.default_timeout
        logger.debug(f"HTTP {request.method} {request.url}")
        try:
            resp = self.session.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                params=dict(request.params) if request.params is not None else None,
                json=request.json,
                data=request.data,
                timeout=timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportFault(f"{request.method} {request.url} failed: {e}", url=request.url) from e

        return TransportResponse(
            status_code=resp.status_code,
            body=resp.content or b"",
            headers=dict(resp.headers),
            message=_extract_message(resp),
        )

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
