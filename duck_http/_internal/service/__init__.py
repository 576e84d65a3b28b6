"""Service layer that creates requests and completes them.

WARNING: This is a system-level module used by the Http dispatcher.
Do not call directly from user code.
"""

from duck_http._internal.service.base import HttpService
from duck_http._internal.service.client import HttpxService, get_http_service

__all__ = [
    "HttpService",
    "HttpxService",
    "get_http_service",
]
