"""Attempt outcomes - the tagged result of classifying one attempt"""

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class FailureReason:
    """Why an attempt failed"""

    message: Optional[str] = None  # Explicit message from the response or fault
    status_code: Optional[int] = None  # HTTP status, None for transport faults
    error: Optional[BaseException] = None  # Transport fault, if any

    def describe(self) -> str:
        """Human-readable reason: message, else status code, else the fault"""
        if self.message:
            return self.message
        if self.status_code is not None:
            return str(self.status_code)
        if self.error is not None:
            return str(self.error) or type(self.error).__name__
        return "unknown error"


@dataclass(frozen=True)
class Success:
    payload: Any
    status_code: int = 200


@dataclass(frozen=True)
class RetryableFailure:
    reason: FailureReason

    def exhausted(self) -> "TerminalFailure":
        """Same failure, once no retries are left"""
        return TerminalFailure(self.reason)


@dataclass(frozen=True)
class TerminalFailure:
    reason: FailureReason


AttemptOutcome = Union[Success, RetryableFailure, TerminalFailure]
