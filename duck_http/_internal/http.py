"""Shared HTTP client configuration."""

import httpx

from duck_http._version import __version__

DEFAULT_TIMEOUT = 30.0
DEFAULT_REDIRECT_LIMIT = 32


def create_http_client(
    *,
    timeout: float | None = DEFAULT_TIMEOUT,
    redirect_limit: int = DEFAULT_REDIRECT_LIMIT,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create configured HTTP client.

    Args:
        timeout: Request timeout in seconds, None for no timeout.
        redirect_limit: Maximum redirects to follow; 0 disables following.
        transport: Optional transport override (used by tests).

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout,
        follow_redirects=redirect_limit > 0,
        max_redirects=redirect_limit,
        transport=transport,
        headers={"User-Agent": f"duck-http/{__version__}"},
    )
