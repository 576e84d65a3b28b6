"""Process-wide request dispatcher and super-header registry."""

import time
from collections.abc import Generator, Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from duck_http._internal.service import HttpService, get_http_service
from duck_http.exceptions import HttpRequestStateError, HttpTimeoutError, HttpValidationError
from duck_http.models import MultipartFormSection
from duck_http.request import HttpRequest, ResponseCallback

DEFAULT_TICK_INTERVAL = 1 / 60


class Http:
    """Singleton that owns super headers and drives in-flight requests.

    The host calls `update()` once per frame (or loop iteration). Each call
    reports progress for every in-flight request and advances its send
    routine by one step; completion callbacks therefore always run on the
    thread calling `update()`.

    Request constructors and super-header methods are classmethods that
    delegate to the singleton, which is created lazily from the environment
    unless `Http.init()` installed a custom service first.
    """

    _instance: "Http | None" = None

    def __init__(self, service: HttpService) -> None:
        self._service = service
        self._super_headers: dict[str, str] = {}
        self._requests: dict[HttpRequest, Generator[None, None, None]] = {}
        self._advancing: HttpRequest | None = None

    @classmethod
    def instance(cls) -> "Http":
        if cls._instance is None:
            cls.init(get_http_service())
        return cls._instance  # type: ignore[return-value]

    @classmethod
    def init(cls, service: HttpService) -> None:
        """Install the singleton with the given service. No-op if one exists."""
        if cls._instance is not None:
            return
        cls._instance = cls(service)

    @classmethod
    def shutdown(cls) -> None:
        """Abort every in-flight request and drop the singleton."""
        instance = cls._instance
        if instance is None:
            return
        for request in list(instance._requests):
            instance.abort(request)
        cls._instance = None

    @property
    def service(self) -> HttpService:
        return self._service

    @property
    def in_flight(self) -> int:
        return len(self._requests)

    # =========================================================================
    # Super Headers
    # =========================================================================

    @classmethod
    def get_super_headers(cls) -> dict[str, str]:
        """Super headers are added to every subsequently created request.

        Returns:
            A copy of the super headers.
        """
        return dict(cls.instance()._super_headers)

    @classmethod
    def set_super_header(cls, key: str, value: str) -> None:
        """Set a super header, replacing any existing value for the key.

        Raises:
            HttpValidationError: If key or value is empty.
        """
        if not key:
            raise HttpValidationError("Key cannot be null or empty.")
        if not value:
            raise HttpValidationError(
                "Value cannot be null or empty, if you are intending to remove "
                "the value, use the remove_super_header() method."
            )
        cls.instance()._super_headers[key] = value

    @classmethod
    def remove_super_header(cls, key: str) -> bool:
        """Remove a super header.

        Returns:
            True if the header existed and was removed.

        Raises:
            HttpValidationError: If key is empty.
        """
        if not key:
            raise HttpValidationError("Key cannot be null or empty.")
        return cls.instance()._super_headers.pop(key, None) is not None

    # =========================================================================
    # Request Constructors
    # =========================================================================

    @classmethod
    def get(cls, uri: str) -> HttpRequest:
        return cls.instance()._service.get(uri)

    @classmethod
    def post(cls, uri: str, post_data: str) -> HttpRequest:
        return cls.instance()._service.post(uri, post_data)

    @classmethod
    def post_form(cls, uri: str, form_data: Mapping[str, str]) -> HttpRequest:
        return cls.instance()._service.post_form(uri, form_data)

    @classmethod
    def post_multipart(
        cls, uri: str, sections: Iterable[MultipartFormSection]
    ) -> HttpRequest:
        return cls.instance()._service.post_multipart(uri, sections)

    @classmethod
    def post_bytes(cls, uri: str, data: bytes, content_type: str) -> HttpRequest:
        return cls.instance()._service.post_bytes(uri, data, content_type)

    @classmethod
    def post_json(cls, uri: str, payload: str | BaseModel | Any) -> HttpRequest:
        return cls.instance()._service.post_json(uri, payload)

    @classmethod
    def put(cls, uri: str, body_data: bytes | str) -> HttpRequest:
        return cls.instance()._service.put(uri, body_data)

    @classmethod
    def delete(cls, uri: str) -> HttpRequest:
        return cls.instance()._service.delete(uri)

    @classmethod
    def head(cls, uri: str) -> HttpRequest:
        return cls.instance()._service.head(uri)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def send(
        self,
        request: HttpRequest,
        on_success: Sequence[ResponseCallback] = (),
        on_error: Sequence[ResponseCallback] = (),
        on_network_error: Sequence[ResponseCallback] = (),
    ) -> None:
        """Start the request and track it until its routine finishes.

        Raises:
            HttpRequestStateError: If the request was already sent.
        """
        if request in self._requests or request.transfer.is_sent:
            raise HttpRequestStateError("Request has already been sent.")

        routine = self._service.send(request, on_success, on_error, on_network_error)
        try:
            next(routine)
        except StopIteration:
            return
        self._requests[request] = routine

    def abort(self, request: HttpRequest) -> None:
        self._service.abort(request)
        routine = self._requests.pop(request, None)
        # A routine cannot close itself while its callbacks are running.
        if routine is not None and request is not self._advancing:
            routine.close()

    def update(self) -> None:
        """Run one tick: report progress, then advance every send routine."""
        requests = list(self._requests.items())

        for request, routine in requests:
            try:
                request.update_progress()
            except Exception:
                self._requests.pop(request, None)
                routine.close()
                raise

        for request, routine in requests:
            if self._requests.get(request) is not routine:
                continue
            self._advancing = request
            try:
                next(routine)
            except StopIteration:
                self._requests.pop(request, None)
            except Exception:
                self._requests.pop(request, None)
                raise
            finally:
                self._advancing = None

    def run_until_done(
        self,
        request: HttpRequest | None = None,
        *,
        timeout: float | None = None,
        interval: float = DEFAULT_TICK_INTERVAL,
    ) -> None:
        """Tick until the request (or every in-flight request) has completed.

        Args:
            request: The request to wait for; None waits for all requests.
            timeout: Maximum seconds to wait, None to wait indefinitely.
            interval: Seconds to sleep between ticks.

        Raises:
            HttpTimeoutError: If the timeout elapses first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while self._is_pending(request):
            if deadline is not None and time.monotonic() >= deadline:
                raise HttpTimeoutError(f"Requests still in flight after {timeout}s.")
            time.sleep(interval)
            self.update()

    def _is_pending(self, request: HttpRequest | None) -> bool:
        if request is None:
            return bool(self._requests)
        return request in self._requests
