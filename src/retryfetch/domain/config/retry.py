"""Retry configuration model."""

from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RetryConfig(BaseModel):
    """Configuration for one retry loop invocation.

    Attributes:
        max_retries: Retries after the first attempt (0 = fail after first error)
        initial_backoff: Wait before the first retry, in milliseconds
        backoff_factor: Backoff multiplier between retries (1 = constant backoff)
        on_retry: Called before each wait with (remaining retries, backoff in ms)
        retryable_statuses: HTTP statuses worth retrying (None = every failure)
    """

    max_retries: int = Field(
        0, ge=0, validation_alias=AliasChoices("max_retries", "maxRetries", "retries")
    )
    initial_backoff: int = Field(
        200, ge=0, validation_alias=AliasChoices("initial_backoff", "initialBackoff", "backoff")
    )
    # Factors below 1 shrink the backoff; allowed, not recommended
    backoff_factor: float = Field(
        1.0, ge=0.0, validation_alias=AliasChoices("backoff_factor", "backoffFactor")
    )
    on_retry: Optional[Callable[[int, int], Any]] = Field(
        None, exclude=True, validation_alias=AliasChoices("on_retry", "onRetry", "callback")
    )
    retryable_statuses: Optional[FrozenSet[int]] = Field(
        None, validation_alias=AliasChoices("retryable_statuses", "retryableStatuses")
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


def _option_names() -> Dict[str, str]:
    """Map every accepted option name (field name or alias) to its field name"""
    names = {}
    for name, field in RetryConfig.model_fields.items():
        alias = field.validation_alias
        choices = alias.choices if isinstance(alias, AliasChoices) else [name]
        for choice in choices:
            if isinstance(choice, str):
                names[choice] = name
        names[name] = name
    return names


def normalize_retry_options(options: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename camelCase and legacy option names to field names

    Unknown keys are kept so validation still reports them.
    """
    names = _option_names()
    return {names.get(key, key): value for key, value in options.items()}


def resolve_retry_config(
    config: Union[RetryConfig, Mapping[str, Any], None] = None,
    defaults: Optional[RetryConfig] = None,
) -> RetryConfig:
    """Merge caller-supplied retry options over defaults

    Args:
        config: Complete config, partial overrides, or None
        defaults: Base values (built-in defaults if None)

    Returns:
        Fully resolved RetryConfig

    Raises:
        pydantic.ValidationError: If an override is invalid or unknown
    """
    if isinstance(config, RetryConfig):
        return config
    if defaults is None:
        defaults = RetryConfig()
    if not config:
        return defaults

    # Validate overrides on their own first so aliases resolve to field names
    overrides = RetryConfig.model_validate(dict(config))
    merged = {name: getattr(defaults, name) for name in RetryConfig.model_fields}
    merged.update({name: getattr(overrides, name) for name in overrides.model_fields_set})
    return RetryConfig(**merged)
