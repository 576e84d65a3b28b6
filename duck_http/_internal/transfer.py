"""Worker-thread HTTP transfer, the primitive polled by the dispatcher.

A WebTransfer runs one httpx exchange on a daemon thread and publishes its
progress and outcome through plain attributes. Nothing here invokes user
code; the dispatcher polls `is_done` once per tick and builds the response
on its own thread.
"""

import threading
import time
from collections.abc import Iterator

import httpx

from duck_http._internal.http import DEFAULT_REDIRECT_LIMIT, DEFAULT_TIMEOUT, create_http_client
from duck_http.exceptions import HttpRequestStateError

DEFAULT_CHUNK_SIZE = 16 * 1024

ABORTED_MESSAGE = "Request aborted"
TIMEOUT_MESSAGE = "Request timeout"


class _TransferAborted(Exception):
    """Raised inside the worker when the transfer is aborted mid-stream."""


class _DeadlineExceeded(Exception):
    """Raised inside the worker when the whole exchange outlives its timeout."""


class _UploadStream(httpx.SyncByteStream):
    """Re-iterable request body that reports upload progress.

    Each iteration restarts from the first byte so 307/308 redirects can
    replay the body.
    """

    def __init__(self, transfer: "WebTransfer", content: bytes) -> None:
        self._transfer = transfer
        self._content = content

    def __iter__(self) -> Iterator[bytes]:
        total = len(self._content)
        chunk_size = self._transfer.chunk_size
        for start in range(0, total, chunk_size):
            self._transfer._check_running()
            chunk = self._content[start : start + chunk_size]
            yield chunk
            self._transfer.upload_progress = min((start + len(chunk)) / total, 1.0)


class WebTransfer:
    """A single HTTP exchange executed on a background thread.

    Configure the transfer, call `send()` once, then poll `is_done`. Once
    done, the result attributes (status_code, content, text, error,
    response_headers, url) are stable.
    """

    def __init__(
        self,
        url: str,
        method: str = "GET",
        *,
        content: bytes | None = None,
        content_type: str | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        redirect_limit: int = DEFAULT_REDIRECT_LIMIT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.method = method.upper()
        self.content_type = content_type
        self.timeout = timeout
        self.redirect_limit = redirect_limit
        self.chunk_size = chunk_size
        self._body = content
        self._transport = transport
        self._headers: dict[str, str] = {}

        self.upload_progress = 0.0
        self.download_progress = 0.0

        self.status_code = 0
        self.content: bytes | None = None
        self.text: str | None = None
        self.error: str | None = None
        self.response_headers: dict[str, str] = {}
        self.is_network_error = False

        self._lock = threading.Lock()
        self._done = threading.Event()
        self._aborted = threading.Event()
        self._deadline: float | None = None
        self._thread: threading.Thread | None = None

    @property
    def request_headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def is_done(self) -> bool:
        return self._done.is_set()

    @property
    def is_aborted(self) -> bool:
        return self._aborted.is_set()

    @property
    def is_sent(self) -> bool:
        return self._thread is not None

    @property
    def is_http_error(self) -> bool:
        return not self.is_network_error and self.status_code >= 400

    def set_request_header(self, key: str, value: str) -> None:
        self._headers[key] = value

    def send(self) -> None:
        """Start the exchange on a daemon worker thread."""
        if self._thread is not None:
            raise HttpRequestStateError("Transfer has already been sent.")
        self._thread = threading.Thread(
            target=self._run,
            name=f"duck-http {self.method} {self.url}",
            daemon=True,
        )
        self._thread.start()

    def abort(self) -> None:
        """Finish the transfer as a network error; the worker's result is discarded."""
        with self._lock:
            if self._done.is_set():
                return
            self._aborted.set()
            self.is_network_error = True
            self.error = ABORTED_MESSAGE
            self._done.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the worker thread to exit."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        # The httpx timeout bounds each phase; the deadline bounds the whole exchange.
        self._deadline = None if self.timeout is None else time.monotonic() + self.timeout
        try:
            self._exchange()
        except _TransferAborted:
            pass
        except (httpx.TimeoutException, _DeadlineExceeded):
            self._fail(TIMEOUT_MESSAGE)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            self._fail(str(e) or type(e).__name__)
        except Exception as e:
            self._fail(f"{type(e).__name__}: {e}")

    def _exchange(self) -> None:
        client = create_http_client(
            timeout=self.timeout,
            redirect_limit=self.redirect_limit,
            transport=self._transport,
        )
        try:
            request = self._build_request(client)
            response = client.send(request, stream=True)
            try:
                body = self._download(response)
            finally:
                response.close()
        finally:
            # Closing the client closes its transport, which a caller may share.
            if self._transport is None:
                client.close()

        with self._lock:
            if self._done.is_set():
                return
            self.url = str(response.url)
            self.status_code = response.status_code
            if response.status_code >= 400:
                self.error = f"{response.http_version} {response.status_code} {response.reason_phrase}"
            self.response_headers = dict(response.headers.items())
            self.content = body
            self.text = body.decode(response.encoding or "utf-8", errors="replace")
            self.upload_progress = 1.0
            self.download_progress = 1.0
            self._done.set()

    def _build_request(self, client: httpx.Client) -> httpx.Request:
        headers = client.headers.copy()
        if self.content_type is not None and not any(
            key.lower() == "content-type" for key in self._headers
        ):
            headers["Content-Type"] = self.content_type
        headers.update(self._headers)
        # Requests built outside the client carry no timeout unless set here.
        extensions = {"timeout": client.timeout.as_dict()}

        if self._body is None:
            return httpx.Request(self.method, self.url, headers=headers, extensions=extensions)

        headers["Content-Length"] = str(len(self._body))
        return httpx.Request(
            self.method,
            self.url,
            headers=headers,
            stream=_UploadStream(self, self._body),
            extensions=extensions,
        )

    def _download(self, response: httpx.Response) -> bytes:
        try:
            total = int(response.headers.get("Content-Length", ""))
        except ValueError:
            total = 0
        chunks: list[bytes] = []
        for chunk in response.iter_bytes(self.chunk_size):
            self._check_running()
            chunks.append(chunk)
            if total > 0:
                self.download_progress = min(response.num_bytes_downloaded / total, 1.0)
        self._check_running()
        return b"".join(chunks)

    def _check_running(self) -> None:
        """Stop the worker if the transfer was aborted or ran past its deadline."""
        if self.is_aborted:
            raise _TransferAborted()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise _DeadlineExceeded()

    def _fail(self, message: str) -> None:
        with self._lock:
            if self._done.is_set():
                return
            self.is_network_error = True
            self.error = message
            self._done.set()
