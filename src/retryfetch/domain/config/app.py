"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from retryfetch.domain.config.http import HttpConfig
from retryfetch.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Root configuration model.

    Validation is performed at load time to fail fast on configuration errors.

    Attributes:
        retry: Default retry policy
        http: Transport defaults
    """

    retry: RetryConfig = Field(default_factory=RetryConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "retry": {
                    "max_retries": 3,
                    "initial_backoff": 200,
                    "backoff_factor": 2.0,
                    "retryable_statuses": None,
                },
                "http": {
                    "timeout": 30.0,
                    "headers": {"Accept": "application/json"},
                },
            }
        },
    )
