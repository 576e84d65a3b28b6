"""httpx-backed HTTP service."""

import os

import httpx

from duck_http._internal.http import DEFAULT_REDIRECT_LIMIT, DEFAULT_TIMEOUT
from duck_http._internal.service.base import HttpService
from duck_http._internal.transfer import DEFAULT_CHUNK_SIZE, WebTransfer
from duck_http.exceptions import HttpConfigError

DEFAULT_TIMEOUT_MS = int(DEFAULT_TIMEOUT * 1000)


class HttpxService(HttpService):
    """Default service: every request is a WebTransfer on its own worker thread.

    Use `HttpxService.from_env()` to configure defaults from environment
    variables.
    """

    def __init__(
        self,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        redirect_limit: int = DEFAULT_REDIRECT_LIMIT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        transport: httpx.BaseTransport | None = None,
        debug: bool = False,
    ) -> None:
        """Initialize the service.

        Args:
            timeout_ms: Default request timeout in milliseconds, 0 for none.
            redirect_limit: Default maximum redirects to follow.
            chunk_size: Upload and download chunk size in bytes.
            transport: Optional httpx transport shared by all transfers. The caller
                owns it; transfers never close it.
            debug: Enable debug logging to stderr.
        """
        super().__init__(debug=debug)
        if timeout_ms < 0:
            raise HttpConfigError(f"timeout_ms cannot be negative: {timeout_ms}")
        if redirect_limit < 0:
            raise HttpConfigError(f"redirect_limit cannot be negative: {redirect_limit}")
        if chunk_size <= 0:
            raise HttpConfigError(f"chunk_size must be positive: {chunk_size}")

        self._timeout_ms = timeout_ms
        self._redirect_limit = redirect_limit
        self._chunk_size = chunk_size
        self._transport = transport

    @classmethod
    def from_env(cls) -> "HttpxService":
        """Create a service from environment variables.

        Optional environment variables:
            DUCK_HTTP_TIMEOUT_MS: Default timeout in milliseconds (0 = none).
            DUCK_HTTP_REDIRECT_LIMIT: Default redirect limit.
            DUCK_HTTP_CHUNK_SIZE: Transfer chunk size in bytes.
            DUCK_HTTP_DEBUG: Set to "1" to enable debug logging.

        Returns:
            A configured HttpxService.
        """
        debug = os.environ.get("DUCK_HTTP_DEBUG", "") == "1"
        timeout_ms = int(os.environ.get("DUCK_HTTP_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS)))
        redirect_limit = int(
            os.environ.get("DUCK_HTTP_REDIRECT_LIMIT", str(DEFAULT_REDIRECT_LIMIT))
        )
        chunk_size = int(os.environ.get("DUCK_HTTP_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE)))

        return cls(
            timeout_ms=timeout_ms,
            redirect_limit=redirect_limit,
            chunk_size=chunk_size,
            debug=debug,
        )

    @property
    def debug(self) -> bool:
        return self._debug

    def create_transfer(
        self,
        uri: str,
        method: str,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> WebTransfer:
        return WebTransfer(
            uri,
            method,
            content=content,
            content_type=content_type,
            timeout=self._timeout_ms / 1000 or None,
            redirect_limit=self._redirect_limit,
            chunk_size=self._chunk_size,
            transport=self._transport,
        )


def get_http_service() -> HttpxService:
    """Get an httpx service configured from environment variables."""
    return HttpxService.from_env()
