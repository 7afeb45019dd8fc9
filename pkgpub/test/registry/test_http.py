"""Tests for registry/http.py - HTTP client abstraction."""

from __future__ import annotations

import pytest

from pkgpub.core.result import Err, Ok
from pkgpub.registry.http import (
    HttpClient,
    HttpError,
    HttpResponse,
    MockHttpClient,
    RealHttpClient,
    _chunks,
)


class TestHttpResponse:
    def test_success_range(self) -> None:
        assert HttpResponse(status=200).is_success
        assert HttpResponse(status=204).is_success
        assert not HttpResponse(status=404).is_success
        assert not HttpResponse(status=302).is_success

    def test_is_frozen(self) -> None:
        response = HttpResponse(status=200)
        with pytest.raises(AttributeError):
            response.status = 500  # type: ignore[misc]


def test_http_error_str() -> None:
    error = HttpError(url="https://example.com", message="Connection refused")
    assert str(error) == "Connection refused (https://example.com)"


class TestMockHttpClient:
    def test_implements_protocol(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)

    def test_unknown_request_is_404(self) -> None:
        client = MockHttpClient()
        result = client.request("GET", "https://example.com/x")
        assert isinstance(result, Ok)
        assert result.value.status == 404

    def test_configured_response_and_recording(self) -> None:
        client = MockHttpClient()
        client.set_response("post", "https://example.com/x", HttpResponse(201, b"{}"))

        result = client.request(
            "POST", "https://example.com/x", body=b"data", headers={"Authorization": "k"}
        )

        assert result == Ok(HttpResponse(201, b"{}"))
        assert len(client.requests) == 1
        recorded = client.requests[0]
        assert recorded.method == "POST"
        assert recorded.body == b"data"
        assert recorded.headers["Authorization"] == "k"

    def test_transport_error(self) -> None:
        client = MockHttpClient()
        client.set_response("GET", "https://example.com/x", HttpError("https://example.com/x", "down"))
        result = client.request("GET", "https://example.com/x")
        assert isinstance(result, Err)
        assert result.error.message == "down"

    def test_progress_reports_full_body(self) -> None:
        client = MockHttpClient()
        client.set_response("POST", "https://example.com/x", HttpResponse(200))
        seen: list[tuple[int, int]] = []
        client.request(
            "POST", "https://example.com/x", body=b"12345", progress=lambda a, b: seen.append((a, b))
        )
        assert seen == [(5, 5)]


def test_upload_chunks_report_progress() -> None:
    body = b"x" * (64 * 1024 + 10)
    seen: list[tuple[int, int]] = []
    chunks = list(_chunks(body, lambda sent, total: seen.append((sent, total))))
    assert b"".join(chunks) == body
    assert seen == [(64 * 1024, len(body)), (len(body), len(body))]


def test_real_client_implements_protocol() -> None:
    client = RealHttpClient(timeout=5.0)
    assert isinstance(client, HttpClient)
    assert client.timeout == 5.0
    assert client.user_agent.startswith("pkgpub/")
