"""Domain models"""

from retryfetch.domain.models.outcome import (
    AttemptOutcome,
    FailureReason,
    RetryableFailure,
    Success,
    TerminalFailure,
)
from retryfetch.domain.models.request import RequestDescriptor

__all__ = [
    "AttemptOutcome",
    "FailureReason",
    "RequestDescriptor",
    "RetryableFailure",
    "Success",
    "TerminalFailure",
]
