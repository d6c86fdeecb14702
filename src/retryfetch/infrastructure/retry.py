"""Retry loop built on tenacity.

Each attempt sends the request once and classifies what came back into an
AttemptOutcome. tenacity drives the loop: it retries RetryableFailure
results, waits as the backoff policy says, and stops once the retry budget
is spent. Exceptions raised while classifying (PayloadParseError) are not
retried and propagate unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from tenacity import AsyncRetrying, RetryCallState, Retrying, retry_if_result, stop_after_attempt
from tenacity.wait import wait_base

from retryfetch.domain.backoff import RoundTracker
from retryfetch.domain.config.retry import RetryConfig, resolve_retry_config
from retryfetch.domain.errors import TerminalError
from retryfetch.domain.models.outcome import (
    AttemptOutcome,
    FailureReason,
    RetryableFailure,
    Success,
    TerminalFailure,
)
from retryfetch.domain.models.request import RequestDescriptor
from retryfetch.infrastructure.transport.base import (
    AsyncTransport,
    ThreadedAsyncTransport,
    Transport,
    TransportResponse,
)
from retryfetch.infrastructure.transport.requests_transport import RequestsTransport

logger = logging.getLogger(__name__)

RetryOptions = Union[RetryConfig, Mapping[str, Any], None]


def classify_response(response: TransportResponse, config: RetryConfig) -> AttemptOutcome:
    """Classify a response into an AttemptOutcome

    Raises:
        PayloadParseError: If the response is ok but its body cannot be decoded
    """
    if response.ok:
        return Success(payload=response.payload(), status_code=response.status_code)

    reason = FailureReason(message=response.message, status_code=response.status_code)
    if config.retryable_statuses is not None and response.status_code not in config.retryable_statuses:
        return TerminalFailure(reason)
    return RetryableFailure(reason)


def classify_fault(error: Exception) -> AttemptOutcome:
    """Transport faults are always retryable"""
    return RetryableFailure(FailureReason(message=str(error) or None, error=error))


class wait_backoff_policy(wait_base):
    """Wait the backoff of the current retry round (tenacity sleeps in seconds).

    tenacity may ask for a wait after the last attempt; that wait is 0.
    """

    def __init__(self, rounds: RoundTracker) -> None:
        self.rounds = rounds

    def __call__(self, retry_state: RetryCallState) -> float:
        current = self.rounds.for_attempt(retry_state.attempt_number)
        if current is None:
            return 0.0
        return current.backoff / 1000.0


def _is_retryable(outcome: AttemptOutcome) -> bool:
    return isinstance(outcome, RetryableFailure)


def _last_outcome(retry_state: RetryCallState) -> AttemptOutcome:
    return retry_state.outcome.result()


def _before_sleep(
    request: RequestDescriptor, config: RetryConfig, rounds: RoundTracker
) -> Callable[[RetryCallState], None]:
    """Log the failure and call the on_retry hook before each wait"""
    total = config.max_retries + 1

    def _notify(retry_state: RetryCallState) -> None:
        current = rounds.for_attempt(retry_state.attempt_number)
        outcome = retry_state.outcome.result()
        logger.warning(
            f"{request.method} {request.url} failed (attempt {retry_state.attempt_number}/{total}): "
            f"{outcome.reason.describe()}. Retrying in {current.backoff} ms..."
        )
        if config.on_retry is None:
            return
        try:
            config.on_retry(current.remaining_retries, current.backoff)
        except Exception:
            # Hook failures never interrupt the retry sequence
            logger.warning("on_retry hook raised, continuing", exc_info=True)

    return _notify


def _retrying_options(request: RequestDescriptor, config: RetryConfig, sleep: Callable) -> dict:
    rounds = RoundTracker(config)
    return dict(
        stop=stop_after_attempt(config.max_retries + 1),
        wait=wait_backoff_policy(rounds),
        retry=retry_if_result(_is_retryable),
        before_sleep=_before_sleep(request, config, rounds),
        retry_error_callback=_last_outcome,
        sleep=sleep,
    )


def _resolve(outcome: AttemptOutcome, request: RequestDescriptor, attempts: int) -> Any:
    """Return the payload of a success, raise TerminalError otherwise"""
    if isinstance(outcome, Success):
        if attempts > 1:
            logger.info(f"{request.method} {request.url} succeeded after {attempts} attempts")
        return outcome.payload

    if isinstance(outcome, RetryableFailure):
        outcome = outcome.exhausted()
    reason = outcome.reason
    logger.error(f"{request.method} {request.url} failed after {attempts} attempt(s): {reason.describe()}")
    error = TerminalError(reason.describe(), status_code=reason.status_code, attempts=attempts)
    if reason.error is not None:
        raise error from reason.error
    raise error


def _as_request(request: Union[RequestDescriptor, str]) -> RequestDescriptor:
    if isinstance(request, str):
        return RequestDescriptor(url=request)
    return request


def _attempt(transport: Transport, request: RequestDescriptor, config: RetryConfig) -> AttemptOutcome:
    try:
        response = transport.send(request)
    except Exception as e:
        logger.debug(f"{request.method} {request.url} raised {type(e).__name__}: {e}")
        return classify_fault(e)
    return classify_response(response, config)


async def _attempt_async(
    transport: AsyncTransport, request: RequestDescriptor, config: RetryConfig
) -> AttemptOutcome:
    try:
        response = await transport.send(request)
    except Exception as e:
        logger.debug(f"{request.method} {request.url} raised {type(e).__name__}: {e}")
        return classify_fault(e)
    return classify_response(response, config)


def execute(
    request: Union[RequestDescriptor, str],
    config: RetryOptions = None,
    *,
    transport: Optional[Transport] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Send a request, retrying failures, and return the decoded JSON payload

    Args:
        request: Request descriptor or URL (GET)
        config: RetryConfig, partial overrides merged over defaults, or None
        transport: Transport to use (a RequestsTransport if None)
        sleep: Blocking sleep in seconds

    Returns:
        Decoded payload of the first successful response

    Raises:
        TerminalError: If retries are exhausted or the failure is not retryable
        PayloadParseError: If a successful response has an undecodable body
    """
    descriptor = _as_request(request)
    resolved = resolve_retry_config(config)
    owned = transport is None
    if transport is None:
        transport = RequestsTransport()

    retrying = Retrying(**_retrying_options(descriptor, resolved, sleep))
    try:
        outcome = retrying(_attempt, transport, descriptor, resolved)
    finally:
        if owned:
            transport.close()
    return _resolve(outcome, descriptor, retrying.statistics.get("attempt_number", 1))


async def execute_async(
    request: Union[RequestDescriptor, str],
    config: RetryOptions = None,
    *,
    transport: Union[AsyncTransport, Transport, None] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Any:
    """Async variant of execute(); the backoff wait does not block the event loop

    A blocking Transport is run in a worker thread.
    """
    descriptor = _as_request(request)
    resolved = resolve_retry_config(config)
    owned: Optional[Transport] = None
    if transport is None:
        owned = RequestsTransport()
        transport = owned
    if isinstance(transport, Transport):
        transport = ThreadedAsyncTransport(transport)

    retrying = AsyncRetrying(**_retrying_options(descriptor, resolved, sleep))
    try:
        outcome = await retrying(_attempt_async, transport, descriptor, resolved)
    finally:
        if owned is not None:
            owned.close()
    return _resolve(outcome, descriptor, retrying.statistics.get("attempt_number", 1))
