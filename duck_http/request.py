"""Fluent request builder."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from duck_http.exceptions import HttpRequestStateError, HttpValidationError
from duck_http.models.response import HttpResponse

ProgressCallback = Callable[[float], None]
ResponseCallback = Callable[[HttpResponse], None]


def _http():
    from duck_http.http import Http

    return Http


class HttpRequest:
    """A request under construction.

    Headers start as a snapshot of the super headers at the time the request
    is created. Every builder method returns the request so calls can be
    chained:

        Http.get("https://example.com/items") \\
            .set_header("Accept", "application/json") \\
            .on_success(handle_items) \\
            .on_network_error(handle_offline) \\
            .send()

    Callbacks run on the thread that calls `Http.update()`.
    """

    def __init__(self, transfer: Any) -> None:
        self._transfer = transfer
        self._headers: dict[str, str] = _http().get_super_headers()

        self._on_upload_progress: list[ProgressCallback] = []
        self._on_download_progress: list[ProgressCallback] = []
        self._on_success: list[ResponseCallback] = []
        self._on_error: list[ResponseCallback] = []
        self._on_network_error: list[ResponseCallback] = []

        self._upload_progress = 0.0
        self._download_progress = 0.0

    @property
    def transfer(self) -> Any:
        return self._transfer

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def is_done(self) -> bool:
        return self._transfer.is_done

    def remove_super_headers(self) -> "HttpRequest":
        """Remove every header whose key is currently a super header."""
        for key in _http().get_super_headers():
            self._headers.pop(key, None)
        return self

    def set_header(self, key: str, value: str) -> "HttpRequest":
        if not key:
            raise HttpValidationError("Key cannot be null or empty.")
        self._headers[key] = value
        return self

    def set_headers(
        self, headers: Mapping[str, str] | Iterable[tuple[str, str]]
    ) -> "HttpRequest":
        items = headers.items() if isinstance(headers, Mapping) else headers
        for key, value in items:
            self.set_header(key, value)
        return self

    def remove_header(self, key: str) -> bool:
        return self._headers.pop(key, None) is not None

    def on_upload_progress(self, callback: ProgressCallback) -> "HttpRequest":
        self._on_upload_progress.append(callback)
        return self

    def on_download_progress(self, callback: ProgressCallback) -> "HttpRequest":
        self._on_download_progress.append(callback)
        return self

    def on_success(self, callback: ResponseCallback) -> "HttpRequest":
        self._on_success.append(callback)
        return self

    def on_error(self, callback: ResponseCallback) -> "HttpRequest":
        self._on_error.append(callback)
        return self

    def on_network_error(self, callback: ResponseCallback) -> "HttpRequest":
        self._on_network_error.append(callback)
        return self

    def set_timeout(self, duration: float) -> "HttpRequest":
        """Set the timeout in seconds; 0 disables it."""
        if duration < 0:
            raise HttpValidationError("Timeout cannot be negative.")
        self._transfer.timeout = duration or None
        return self

    def set_redirect_limit(self, redirect_limit: int) -> "HttpRequest":
        """Set the maximum redirects to follow; 0 returns 3xx responses as is."""
        if redirect_limit < 0:
            raise HttpValidationError("Redirect limit cannot be negative.")
        self._transfer.redirect_limit = redirect_limit
        return self

    def send(self) -> "HttpRequest":
        """Apply headers and hand the request to the dispatcher.

        Callbacks registered after this call are not invoked.

        Raises:
            HttpRequestStateError: If the request was already sent.
        """
        if self._transfer.is_sent:
            raise HttpRequestStateError("Request has already been sent.")
        for key, value in self._headers.items():
            self._transfer.set_request_header(key, value)

        _http().instance().send(
            self,
            on_success=tuple(self._on_success),
            on_error=tuple(self._on_error),
            on_network_error=tuple(self._on_network_error),
        )
        return self

    def abort(self) -> None:
        _http().instance().abort(self)

    def update_progress(self) -> None:
        """Report progress that moved forward since the last call."""
        download_progress = self._transfer.download_progress
        if self._download_progress < download_progress:
            self._download_progress = download_progress
            for callback in self._on_download_progress:
                callback(download_progress)

        upload_progress = self._transfer.upload_progress
        if self._upload_progress < upload_progress:
            self._upload_progress = upload_progress
            for callback in self._on_upload_progress:
                callback(upload_progress)
