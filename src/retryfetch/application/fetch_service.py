"""Fetch service - retrying HTTP calls with configured defaults"""

import logging
from typing import Any, Mapping, Optional

from retryfetch.domain.config import RetryConfig, resolve_retry_config
from retryfetch.domain.models.request import RequestDescriptor
from retryfetch.infrastructure.config.config_manager import ConfigManager
from retryfetch.infrastructure.retry import RetryOptions, execute, execute_async
from retryfetch.infrastructure.transport.base import AsyncTransport, ThreadedAsyncTransport, Transport
from retryfetch.infrastructure.transport.requests_transport import RequestsTransport

logger = logging.getLogger(__name__)


class FetchService:
    """Sends requests with retry, using defaults from ConfigManager"""

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        transport: Optional[Transport] = None,
        async_transport: Optional[AsyncTransport] = None,
    ):
        """Initialize fetch service

        Args:
            config_manager: Configuration source (loads .retryfetch.yml if None)
            transport: Blocking transport (RequestsTransport if None)
            async_transport: Transport for fetch_async (runs `transport` in a thread if None)
        """
        self.config_manager = config_manager or ConfigManager()
        http_config = self.config_manager.get_http_config()
        self.transport = transport or RequestsTransport(default_timeout=http_config.timeout)
        self.async_transport = async_transport or ThreadedAsyncTransport(self.transport)

    def build_request(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        data: Any = None,
        timeout: Optional[float] = None,
    ) -> RequestDescriptor:
        """Build a descriptor with configured default headers and timeout"""
        http_config = self.config_manager.get_http_config()
        request = RequestDescriptor(
            url=url,
            method=method,
            headers=headers or {},
            params=params,
            json=json,
            data=data,
            timeout=timeout,
        )
        return request.with_defaults(headers=http_config.headers, timeout=http_config.timeout)

    def retry_config(self, retry: RetryOptions = None) -> RetryConfig:
        """Merge per-call retry overrides over the configured defaults"""
        return resolve_retry_config(retry, defaults=self.config_manager.get_retry_config())

    def fetch(self, url: str, *, retry: RetryOptions = None, **request_options: Any) -> Any:
        """Send a request and return its decoded JSON payload

        Args:
            url: Target URL
            retry: Retry overrides for this call
            **request_options: method, headers, params, json, data, timeout

        Returns:
            Decoded payload

        Raises:
            TerminalError: If the request keeps failing
            PayloadParseError: If the successful response is not valid JSON
        """
        request = self.build_request(url, **request_options)
        return execute(request, self.retry_config(retry), transport=self.transport)

    async def fetch_async(self, url: str, *, retry: RetryOptions = None, **request_options: Any) -> Any:
        """Async variant of fetch()"""
        request = self.build_request(url, **request_options)
        return await execute_async(request, self.retry_config(retry), transport=self.async_transport)

    def close(self) -> None:
        self.transport.close()
