import retryfetch
from retryfetch.infrastructure.transport.mock import MockTransport, json_response


def test_execute_exported():
    transport = MockTransport([json_response(500), json_response(200, {"ok": True})])

    payload = retryfetch.execute(
        "http://example.test",
        retryfetch.RetryConfig(max_retries=1, initial_backoff=0),
        transport=transport,
    )

    assert payload == {"ok": True}


def test_error_hierarchy():
    assert issubclass(retryfetch.TerminalError, retryfetch.RetryFetchError)
    assert issubclass(retryfetch.PayloadParseError, retryfetch.RetryFetchError)
    assert issubclass(retryfetch.PayloadParseError, ValueError)
    assert not issubclass(retryfetch.PayloadParseError, retryfetch.TerminalError)
