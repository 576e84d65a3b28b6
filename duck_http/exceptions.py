"""Public exceptions for duck-http.

Network and HTTP failures are never raised; they are delivered to the
request's callbacks as flags on the HttpResponse.
"""


class DuckHttpError(Exception):
    """Base exception for all duck-http errors."""


class HttpConfigError(DuckHttpError):
    """Configuration error (invalid service settings)."""


class HttpValidationError(DuckHttpError, ValueError):
    """Invalid argument passed to a request or the header registry."""


class HttpRequestStateError(DuckHttpError):
    """Operation not valid in the request's current state."""


class HttpTimeoutError(DuckHttpError, TimeoutError):
    """Waiting for a request to complete took longer than allowed."""
