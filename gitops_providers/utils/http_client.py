"""
HTTP session for REST provider bindings.
Wraps one httpx.Client so every request reuses the same connection and auth headers.
"""

from typing import Any

import httpx
import structlog

log = structlog.get_logger(__name__)


class HTTPClient:
    """Lazily-initialized httpx session bound to one API base URL."""

    def __init__(
        self,
        base_url: str,
        max_connections: int = 10,
        max_keepalive_connections: int = 5,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url
        self.max_connections = max_connections
        self.max_keepalive_connections = max_keepalive_connections
        self.timeout = timeout
        self.headers = headers or {}
        self._client: httpx.Client | None = None

    def initialize(self) -> None:
        """Open the underlying session."""
        if self._client is None:
            limits = httpx.Limits(
                max_keepalive_connections=self.max_keepalive_connections,
                max_connections=self.max_connections,
                keepalive_expiry=30.0,
            )

            self._client = httpx.Client(
                base_url=self.base_url,
                limits=limits,
                timeout=self.timeout,
                headers=self.headers,
            )

            log.debug("http_client_initialized", base_url=self.base_url)

    def close(self) -> None:
        """Close the session."""
        if self._client:
            self._client.close()
            self._client = None
            log.debug("http_client_closed", base_url=self.base_url)

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request relative to ``base_url``."""
        if self._client is None:
            self.initialize()

        assert self._client is not None
        return self._client.request(method, path, **kwargs)

    def __enter__(self) -> "HTTPClient":
        self.initialize()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
