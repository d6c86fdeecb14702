"""Tests for domain models"""

import pytest

from retryfetch.domain.models import FailureReason, RequestDescriptor, RetryableFailure, TerminalFailure
from retryfetch.domain.errors import PayloadParseError
from retryfetch.infrastructure.transport.base import TransportResponse
from retryfetch.infrastructure.transport.mock import MockTransport, json_response


class TestRequestDescriptor:
    def test_defaults(self):
        request = RequestDescriptor(url="http://example.test")
        assert request.method == "GET"
        assert dict(request.headers) == {}
        assert request.timeout is None

    def test_headers_are_read_only(self):
        headers = {"Accept": "application/json"}
        request = RequestDescriptor(url="http://example.test", headers=headers)
        headers["Accept"] = "text/html"

        assert request.headers["Accept"] == "application/json"
        with pytest.raises(TypeError):
            request.headers["X-New"] = "1"

    def test_empty_url(self):
        with pytest.raises(ValueError):
            RequestDescriptor(url="")

    def test_json_and_data_exclusive(self):
        with pytest.raises(ValueError):
            RequestDescriptor(url="http://example.test", json={}, data=b"x")

    def test_with_defaults(self):
        request = RequestDescriptor(url="http://example.test", headers={"A": "mine"})
        merged = request.with_defaults(headers={"A": "default", "B": "default"}, timeout=3.0)

        assert dict(merged.headers) == {"A": "mine", "B": "default"}
        assert merged.timeout == 3.0
        assert request.timeout is None

    def test_with_defaults_keeps_own_timeout(self):
        request = RequestDescriptor(url="http://example.test", timeout=1.0)
        assert request.with_defaults(timeout=3.0).timeout == 1.0


class TestFailureReason:
    def test_message_preferred(self):
        assert FailureReason(message="quota exceeded", status_code=429).describe() == "quota exceeded"

    def test_falls_back_to_status(self):
        assert FailureReason(status_code=503).describe() == "503"

    def test_falls_back_to_error(self):
        assert FailureReason(error=TimeoutError()).describe() == "TimeoutError"

    def test_exhausted(self):
        reason = FailureReason(status_code=500)
        assert RetryableFailure(reason).exhausted() == TerminalFailure(reason)


class TestTransportResponse:
    def test_ok_range(self):
        assert TransportResponse(status_code=204).ok
        assert not TransportResponse(status_code=304).ok
        assert not TransportResponse(status_code=199).ok

    def test_payload_empty_body(self):
        with pytest.raises(PayloadParseError):
            TransportResponse(status_code=200).payload()


class TestMockTransport:
    def test_last_step_repeats(self):
        transport = MockTransport([json_response(500), json_response(200, {"ok": True})])
        request = RequestDescriptor(url="http://example.test")

        statuses = [transport.send(request).status_code for _ in range(3)]

        assert statuses == [500, 200, 200]
        assert transport.calls == 3

    def test_empty_script(self):
        with pytest.raises(ValueError):
            MockTransport([])
