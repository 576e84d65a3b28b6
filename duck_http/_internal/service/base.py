"""Abstract HTTP service: request construction and completion routing."""

import json
import sys
from abc import ABC, abstractmethod
from collections.abc import Generator, Iterable, Mapping, Sequence
from typing import Any
from urllib.parse import quote_plus, urlencode

import httpx
from pydantic import BaseModel

from duck_http._internal.redaction import redact_headers
from duck_http.exceptions import HttpValidationError
from duck_http.models import HttpResponse, MultipartFormSection
from duck_http.request import HttpRequest, ResponseCallback
from duck_http.utils import get_response_type

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
OCTET_STREAM_CONTENT_TYPE = "application/octet-stream"
MULTIPART_ENCODING_URL = "http://localhost/"


class HttpService(ABC):
    """Builds requests and produces the routine that completes them.

    Subclasses provide `create_transfer`. The transfer object is the
    underlying HTTP primitive: it must expose `send()`, `abort()`,
    `set_request_header()`, `is_sent`, `is_done`, `is_network_error`,
    `is_http_error`, `upload_progress`, `download_progress` and the result
    fields read by `create_response`.
    """

    def __init__(self, *, debug: bool = False) -> None:
        self._debug = debug

    @abstractmethod
    def create_transfer(
        self,
        uri: str,
        method: str,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> Any:
        """Create an unsent transfer for the given method and body."""

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            print(f"[duck-http] {message}", file=sys.stderr)

    def _create_request(
        self,
        uri: str,
        method: str,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> HttpRequest:
        self._log_debug(f"Creating {method} request: {uri}")
        return HttpRequest(self.create_transfer(uri, method, content, content_type))

    # =========================================================================
    # Request Constructors
    # =========================================================================

    def get(self, uri: str) -> HttpRequest:
        """Create a request configured for HTTP GET."""
        return self._create_request(uri, "GET")

    def post(self, uri: str, post_data: str) -> HttpRequest:
        """Create a request that sends a url-encoded string via HTTP POST.

        Reserved characters are escaped, except "=" and "&" so that
        "key=value&key2=value2" strings keep their structure.
        """
        content = quote_plus(post_data, safe="=&").encode("ascii")
        return self._create_request(uri, "POST", content, FORM_CONTENT_TYPE)

    def post_form(self, uri: str, form_data: Mapping[str, str]) -> HttpRequest:
        """Create a request that sends form fields via HTTP POST."""
        content = urlencode(dict(form_data)).encode("ascii")
        return self._create_request(uri, "POST", content, FORM_CONTENT_TYPE)

    def post_multipart(
        self, uri: str, sections: Iterable[MultipartFormSection]
    ) -> HttpRequest:
        """Create a request that sends a multipart/form-data body via HTTP POST.

        Args:
            uri: The target URI.
            sections: Form sections; at least one is required.

        Returns:
            A request whose body and boundary were encoded by httpx.
        """
        files = [(section.name, section.as_file_tuple()) for section in sections]
        if not files:
            raise HttpValidationError("A multipart form needs at least one section.")

        # The target URI is validated when the transfer is sent, not here.
        encoded = httpx.Request("POST", MULTIPART_ENCODING_URL, files=files)
        content = encoded.read()
        return self._create_request(uri, "POST", content, encoded.headers["Content-Type"])

    def post_bytes(self, uri: str, data: bytes, content_type: str) -> HttpRequest:
        """Create a request that sends raw bytes via HTTP POST.

        Args:
            uri: The target URI.
            data: Body bytes.
            content_type: MIME type of the data (e.g. image/jpeg).
        """
        return self._create_request(uri, "POST", bytes(data), content_type)

    def post_json(self, uri: str, payload: str | BaseModel | Any) -> HttpRequest:
        """Create a request that sends JSON via HTTP POST.

        A str payload is sent as is, a pydantic model is serialized with
        `model_dump_json()`, and anything else goes through `json.dumps()`.
        """
        if isinstance(payload, str):
            body = payload
        elif isinstance(payload, BaseModel):
            body = payload.model_dump_json()
        else:
            body = json.dumps(payload)
        return self.post_bytes(uri, body.encode("utf-8"), JSON_CONTENT_TYPE)

    def put(self, uri: str, body_data: bytes | str) -> HttpRequest:
        """Create a request that uploads raw data via HTTP PUT (str is utf-8 encoded)."""
        content = body_data.encode("utf-8") if isinstance(body_data, str) else bytes(body_data)
        return self._create_request(uri, "PUT", content, OCTET_STREAM_CONTENT_TYPE)

    def delete(self, uri: str) -> HttpRequest:
        return self._create_request(uri, "DELETE")

    def head(self, uri: str) -> HttpRequest:
        return self._create_request(uri, "HEAD")

    # =========================================================================
    # Sending
    # =========================================================================

    def send(
        self,
        request: HttpRequest,
        on_success: Sequence[ResponseCallback] = (),
        on_error: Sequence[ResponseCallback] = (),
        on_network_error: Sequence[ResponseCallback] = (),
    ) -> Generator[None, None, None]:
        """Start the request and wait for it, one step per tick.

        The routine always yields at least once, so callbacks never run
        inside the call that primes it. Exactly one callback list is
        invoked on completion.
        """
        transfer = request.transfer
        self._log_debug(
            f"Sending {transfer.method} {transfer.url} "
            f"headers={redact_headers(transfer.request_headers)}"
        )
        transfer.send()
        yield

        while not transfer.is_done:
            yield

        request.update_progress()
        response = self.create_response(transfer)

        if response.is_network_error:
            self._log_debug(f"Network error for {response.url}: {response.error}")
            callbacks = on_network_error
        elif response.is_http_error:
            self._log_debug(f"HTTP error for {response.url}: {response.error}")
            callbacks = on_error
        else:
            self._log_debug(f"Completed {response.url} with status {response.status_code}")
            callbacks = on_success

        for callback in callbacks:
            callback(response)

    def abort(self, request: HttpRequest) -> None:
        transfer = request.transfer
        if transfer.is_sent and not transfer.is_done:
            self._log_debug(f"Aborting {transfer.method} {transfer.url}")
            transfer.abort()

    @staticmethod
    def create_response(transfer: Any) -> HttpResponse:
        is_network_error = transfer.is_network_error
        is_http_error = transfer.is_http_error
        return HttpResponse(
            url=transfer.url,
            is_successful=not is_network_error and not is_http_error,
            is_http_error=is_http_error,
            is_network_error=is_network_error,
            status_code=transfer.status_code,
            content=transfer.content,
            text=transfer.text,
            error=transfer.error,
            response_headers=dict(transfer.response_headers),
            response_type=get_response_type(transfer.status_code),
        )
