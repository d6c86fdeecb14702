"""RequestDescriptor model - what to send on every attempt"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class RequestDescriptor:
    """Target address plus transport options. Never changes between retries."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Optional[Mapping[str, Any]] = None  # Query string parameters
    json: Any = None  # JSON-serializable body
    data: Optional[Any] = None  # Raw body (bytes, str or form dict)
    timeout: Optional[float] = None  # Transport timeout in seconds

    def __post_init__(self):
        if not self.url:
            raise ValueError("url must not be empty")
        if self.json is not None and self.data is not None:
            raise ValueError("json and data are mutually exclusive")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        if self.params is not None:
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def with_defaults(
        self,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> "RequestDescriptor":
        """Return a copy with default headers and timeout filled in

        Headers set on this descriptor win over the defaults.
        """
        merged = dict(headers or {})
        merged.update(self.headers)
        return replace(
            self,
            headers=merged,
            timeout=self.timeout if self.timeout is not None else timeout,
        )
