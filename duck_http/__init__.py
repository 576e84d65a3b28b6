"""duck-http: a fluent HTTP request layer driven by a per-tick update loop.

Public API:
    Http - Dispatcher, super headers and request constructors
    HttpRequest - Fluent request builder returned by the constructors
    HttpResponse - Outcome handed to completion callbacks
    MultipartFormSection - One part of a multipart/form-data body

Internal (system-level, not for direct use):
    _internal.service - Request construction and completion routing
    _internal.transfer - Worker-thread httpx exchange
"""

from duck_http._version import __version__
from duck_http.exceptions import (
    DuckHttpError,
    HttpConfigError,
    HttpRequestStateError,
    HttpTimeoutError,
    HttpValidationError,
)
from duck_http.http import Http
from duck_http.models import HttpResponse, MultipartFormSection, ResponseType
from duck_http.request import HttpRequest

__all__ = [
    "__version__",
    "Http",
    "HttpRequest",
    "HttpResponse",
    "MultipartFormSection",
    "ResponseType",
    "DuckHttpError",
    "HttpConfigError",
    "HttpRequestStateError",
    "HttpTimeoutError",
    "HttpValidationError",
]
