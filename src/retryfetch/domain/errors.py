"""Error types raised by retryfetch"""

from typing import Optional


class RetryFetchError(Exception):
    """Base class for retryfetch errors."""

    pass


class TransportFault(RetryFetchError):
    """Network-level failure raised by a transport (refused, DNS, timeout)."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.url = url


class TerminalError(RetryFetchError):
    """Request failed and no retries are left (or the failure is not retryable)

    Attributes:
        message: Message from the failing response, else its status code,
            else the transport fault text
        status_code: HTTP status of the last response (None for transport faults)
        attempts: Number of attempts made before giving up
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, attempts: int = 1):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.attempts = attempts

    def __str__(self) -> str:
        return self.message


class PayloadParseError(RetryFetchError, ValueError):
    """Body of a successful response could not be decoded."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
