"""Pydantic models for completed requests."""

from enum import Enum

from pydantic import BaseModel, Field


class ResponseType(str, Enum):
    """Coarse classification of an HTTP status code."""

    UNKNOWN = "unknown"
    SUCCESS = "success"
    ERROR = "error"
    SERVER_ERROR = "server_error"
    CUSTOM = "custom"


class HttpResponse(BaseModel):
    """Outcome of a sent request, handed to exactly one completion callback.

    Exactly one of is_successful, is_http_error and is_network_error is set:
        is_network_error: no usable response arrived (connection failure,
            timeout, redirect limit exceeded, abort)
        is_http_error: a response arrived with status >= 400
        is_successful: anything else
    """

    url: str
    is_successful: bool
    is_http_error: bool = False
    is_network_error: bool = False
    status_code: int = 0
    content: bytes | None = None
    text: str | None = None
    error: str | None = None
    response_headers: dict[str, str] = Field(default_factory=dict)
    response_type: ResponseType = ResponseType.UNKNOWN

    model_config = {"frozen": True}
