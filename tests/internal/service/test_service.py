"""Tests for HttpService request construction and response mapping."""

import json

import pytest
from pydantic import BaseModel

from duck_http._internal.service.base import (
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    OCTET_STREAM_CONTENT_TYPE,
    HttpService,
)
from duck_http.exceptions import HttpValidationError
from duck_http.http import Http
from duck_http.models import MultipartFormSection, ResponseType


class TestRequestConstructors:
    """Tests for the body and method each constructor produces."""

    def test_get(self, http, service):
        """Should create a bodiless GET."""
        Http.get("http://test/a")
        transfer = service.transfers[0]
        assert transfer.method == "GET"
        assert transfer.url == "http://test/a"
        assert transfer.body is None
        assert transfer.content_type is None

    def test_delete_and_head(self, http, service):
        """Should create bodiless DELETE and HEAD requests."""
        Http.delete("http://test/a")
        Http.head("http://test/a")
        assert [t.method for t in service.transfers] == ["DELETE", "HEAD"]
        assert all(t.body is None for t in service.transfers)

    def test_post_url_encodes_string(self, http, service):
        """Should escape reserved characters but keep form structure."""
        Http.post("http://test/a", "name=John Doe&city=São Paulo")
        transfer = service.transfers[0]
        assert transfer.method == "POST"
        assert transfer.body == b"name=John+Doe&city=S%C3%A3o+Paulo"
        assert transfer.content_type == FORM_CONTENT_TYPE

    def test_post_empty_string(self, http, service):
        """Should send an empty form body."""
        Http.post("http://test/a", "")
        assert service.transfers[0].body == b""

    def test_post_form(self, http, service):
        """Should url-encode form fields."""
        Http.post_form("http://test/a", {"user": "ada", "note": "a&b c"})
        transfer = service.transfers[0]
        assert transfer.body == b"user=ada&note=a%26b+c"
        assert transfer.content_type == FORM_CONTENT_TYPE

    def test_post_multipart(self, http, service):
        """Should encode sections as multipart/form-data."""
        Http.post_multipart(
            "http://test/upload",
            [
                MultipartFormSection(name="title", data="Level 1"),
                MultipartFormSection(
                    name="save", data=b"\x00\x01", filename="slot1.sav", content_type="application/octet-stream"
                ),
            ],
        )
        transfer = service.transfers[0]
        assert transfer.content_type.startswith("multipart/form-data; boundary=")
        boundary = transfer.content_type.split("boundary=")[1]
        assert boundary.encode() in transfer.body
        assert b'name="title"' in transfer.body
        assert b"Level 1" in transfer.body
        assert b'filename="slot1.sav"' in transfer.body
        assert b"\x00\x01" in transfer.body

    def test_post_multipart_defers_url_validation(self, http, service):
        """Should accept a malformed URI and leave it for the transfer to report."""
        Http.post_multipart("http://[::1", [MultipartFormSection(name="title", data="Level 1")])
        transfer = service.transfers[0]
        assert transfer.url == "http://[::1"
        assert b"Level 1" in transfer.body

    def test_post_multipart_requires_sections(self, http):
        """Should reject an empty form."""
        with pytest.raises(HttpValidationError):
            Http.post_multipart("http://test/upload", [])

    def test_post_bytes(self, http, service):
        """Should send raw bytes with the given content type."""
        Http.post_bytes("http://test/a", b"\xff\xd8", "image/jpeg")
        transfer = service.transfers[0]
        assert transfer.body == b"\xff\xd8"
        assert transfer.content_type == "image/jpeg"

    def test_post_json_string(self, http, service):
        """Should send a JSON string as is."""
        Http.post_json("http://test/a", '{"score": 10}')
        transfer = service.transfers[0]
        assert transfer.body == b'{"score": 10}'
        assert transfer.content_type == JSON_CONTENT_TYPE

    def test_post_json_model(self, http, service):
        """Should serialize a pydantic model."""

        class Score(BaseModel):
            player: str
            points: int

        Http.post_json("http://test/a", Score(player="ada", points=10))
        assert json.loads(service.transfers[0].body) == {"player": "ada", "points": 10}

    def test_post_json_dict(self, http, service):
        """Should serialize plain objects with json.dumps."""
        Http.post_json("http://test/a", {"player": "ada", "tags": ["x"]})
        assert json.loads(service.transfers[0].body) == {"player": "ada", "tags": ["x"]}

    def test_put_string(self, http, service):
        """Should utf-8 encode a string body."""
        Http.put("http://test/a", "héllo")
        transfer = service.transfers[0]
        assert transfer.method == "PUT"
        assert transfer.body == "héllo".encode()
        assert transfer.content_type == OCTET_STREAM_CONTENT_TYPE

    def test_put_bytes(self, http, service):
        """Should send bytes unchanged."""
        Http.put("http://test/a", b"\x01\x02")
        assert service.transfers[0].body == b"\x01\x02"


class TestCreateResponse:
    """Tests for HttpService.create_response."""

    def test_success(self, service):
        """Should map a completed transfer to a successful response."""
        transfer = service.create_transfer("http://test/a", "GET")
        transfer.complete(201, b"created", {"location": "/a/1"})
        response = HttpService.create_response(transfer)
        assert response.is_successful is True
        assert response.is_http_error is False
        assert response.is_network_error is False
        assert response.status_code == 201
        assert response.content == b"created"
        assert response.text == "created"
        assert response.response_headers == {"location": "/a/1"}
        assert response.response_type == ResponseType.SUCCESS

    def test_http_error(self, service):
        """Should flag HTTP errors and classify server errors."""
        transfer = service.create_transfer("http://test/a", "GET")
        transfer.complete(503)
        response = HttpService.create_response(transfer)
        assert response.is_successful is False
        assert response.is_http_error is True
        assert response.response_type == ResponseType.SERVER_ERROR

    def test_network_error(self, service):
        """Should flag network errors with no status."""
        transfer = service.create_transfer("http://test/a", "GET")
        transfer.fail("Request timeout")
        response = HttpService.create_response(transfer)
        assert response.is_successful is False
        assert response.is_network_error is True
        assert response.is_http_error is False
        assert response.status_code == 0
        assert response.content is None
        assert response.error == "Request timeout"
        assert response.response_type == ResponseType.UNKNOWN


class TestDebugLogging:
    """Tests for debug output."""

    def test_debug_redacts_headers(self, http, service, capsys):
        """Should log sends to stderr without secrets."""
        service._debug = True
        Http.get("http://test/a").set_header("Authorization", "Bearer secret").send()
        err = capsys.readouterr().err
        assert "[duck-http] Sending GET http://test/a" in err
        assert "secret" not in err
        assert "[REDACTED]" in err

    def test_no_output_without_debug(self, http, service, capsys):
        """Should stay silent by default."""
        Http.get("http://test/a").send()
        assert capsys.readouterr().err == ""
