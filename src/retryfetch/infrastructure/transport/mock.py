"""Mock transport for testing and prototyping"""

import json
from typing import Any, Iterable, List, Optional, Union

from retryfetch.domain.models.request import RequestDescriptor
from retryfetch.infrastructure.transport.base import Transport, TransportResponse

ScriptStep = Union[TransportResponse, BaseException]


def json_response(status_code: int, payload: Any = None, message: Optional[str] = None) -> TransportResponse:
    """Build a TransportResponse with a JSON body"""
    body = b"" if payload is None else json.dumps(payload).encode("utf-8")
    return TransportResponse(
        status_code=status_code,
        body=body,
        headers={"Content-Type": "application/json"},
        message=message,
    )


class MockTransport(Transport):
    """Transport that replays a script of responses and exceptions

    Each send() consumes the next step: a TransportResponse is returned,
    an exception is raised. Once the script runs out the last step repeats.
    """

    def __init__(self, script: Iterable[ScriptStep]):
        self.script: List[ScriptStep] = list(script)
        if not self.script:
            raise ValueError("script must contain at least one step")
        self.requests: List[RequestDescriptor] = []

    @property
    def calls(self) -> int:
        """Number of requests sent so far"""
        return len(self.requests)

    def send(self, request: RequestDescriptor) -> TransportResponse:
        index = min(len(self.requests), len(self.script) - 1)
        self.requests.append(request)
        step = self.script[index]
        if isinstance(step, BaseException):
            raise step
        return step
