"""Shared fixtures: a hand-driven service so tick behavior is deterministic."""

import pytest

from duck_http import utils
from duck_http._internal.service import HttpService
from duck_http.http import Http


class FakeTransfer:
    """Transfer whose completion is controlled by the test."""

    def __init__(self, url, method, content=None, content_type=None):
        self.url = url
        self.method = method
        self.body = content
        self.content_type = content_type
        self.timeout = 30.0
        self.redirect_limit = 32
        self.headers = {}

        self.upload_progress = 0.0
        self.download_progress = 0.0

        self.status_code = 0
        self.content = None
        self.text = None
        self.error = None
        self.response_headers = {}
        self.is_network_error = False

        self.is_sent = False
        self.is_done = False
        self.aborted = False

    @property
    def request_headers(self):
        return dict(self.headers)

    @property
    def is_http_error(self):
        return not self.is_network_error and self.status_code >= 400

    def set_request_header(self, key, value):
        self.headers[key] = value

    def send(self):
        self.is_sent = True

    def abort(self):
        self.aborted = True
        self.is_network_error = True
        self.error = "Request aborted"
        self.is_done = True

    def complete(self, status_code=200, body=b"", headers=None):
        self.status_code = status_code
        self.content = body
        self.text = body.decode("utf-8")
        self.response_headers = headers or {}
        if status_code >= 400:
            self.error = f"HTTP/1.1 {status_code}"
        self.upload_progress = 1.0
        self.download_progress = 1.0
        self.is_done = True

    def fail(self, message):
        self.is_network_error = True
        self.error = message
        self.is_done = True


class FakeService(HttpService):
    """Service that records the transfers it creates."""

    def __init__(self):
        super().__init__()
        self.transfers = []

    def create_transfer(self, uri, method, content=None, content_type=None):
        transfer = FakeTransfer(uri, method, content, content_type)
        self.transfers.append(transfer)
        return transfer


@pytest.fixture(autouse=True)
def reset_http():
    """Every test starts without a dispatcher or custom response messages."""
    Http.shutdown()
    yield
    Http.shutdown()
    utils._custom_response_messages.clear()


@pytest.fixture
def service():
    service = FakeService()
    Http.init(service)
    return service


@pytest.fixture
def http(service):
    return Http.instance()
