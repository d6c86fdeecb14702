"""HTTP transport configuration model."""

from typing import Dict

from pydantic import BaseModel, Field


class HttpConfig(BaseModel):
    """Configuration applied to every request.

    Attributes:
        timeout: Transport timeout in seconds
        headers: Default headers (per-request headers override them)
    """

    timeout: float = Field(30.0, gt=0.0)
    headers: Dict[str, str] = Field(default_factory=dict)
