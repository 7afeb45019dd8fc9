"""HTTP client abstraction for the registry API.

This module provides:
- HttpClient: Protocol for HTTP requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing

Any HTTP status is a successful *transport* result (``Ok(HttpResponse)``);
``Err(HttpError)`` means the request never got a response.
"""

from __future__ import annotations

import ssl
import urllib.error
import urllib.request
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pkgpub import __version__
from pkgpub.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "HttpClient",
    "HttpResponse",
    "HttpError",
    "RealHttpClient",
    "MockHttpClient",
]

_UPLOAD_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """A response with any status code.

    Attributes:
        status: HTTP status code
        body: Raw response body
        headers: Response headers (lower-cased names)
    """

    status: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300


@dataclass(frozen=True, slots=True)
class HttpError:
    """Transport failure (no HTTP response was received).

    Attributes:
        url: The URL that failed
        message: Human-readable error message
    """

    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP requests."""

    def request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[HttpResponse, HttpError]:
        """Send a request.

        Args:
            method: HTTP method
            url: Absolute URL
            body: Optional request body, sent in full
            headers: Extra request headers
            progress: Optional callback(sent, total) for upload progress

        Returns:
            Ok with the response (any status), or Err with HttpError
        """
        ...


def _chunks(
    body: bytes, progress: Callable[[int, int], None] | None
) -> Iterator[bytes]:
    total = len(body)
    sent = 0
    while sent < total:
        chunk = body[sent : sent + _UPLOAD_CHUNK_SIZE]
        sent += len(chunk)
        yield chunk
        if progress:
            progress(sent, total)


class RealHttpClient:
    """HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - Request bodies with upload progress
    - Error responses (body is still returned)
    - Timeout handling
    """

    def __init__(self, timeout: float = 60.0, user_agent: str = f"pkgpub/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[HttpResponse, HttpError]:
        all_headers = {"User-Agent": self.user_agent, **(headers or {})}
        data: bytes | Iterator[bytes] | None = body
        if body is not None:
            all_headers["Content-Length"] = str(len(body))
            if progress is not None:
                data = _chunks(body, progress)

        try:
            req = urllib.request.Request(url, data=data, headers=all_headers, method=method)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(
                    HttpResponse(
                        status=response.status,
                        body=response.read(),
                        headers={k.lower(): v for k, v in response.headers.items()},
                    )
                )
        except urllib.error.HTTPError as e:
            payload = e.read()
            return Ok(
                HttpResponse(
                    status=e.code,
                    body=payload,
                    headers={k.lower(): v for k, v in (e.headers or {}).items()},
                )
            )
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, message=str(e)))


@dataclass(frozen=True, slots=True)
class RecordedRequest:
    method: str
    url: str
    body: bytes | None
    headers: Mapping[str, str]


class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are keyed by (method, url). Unknown requests answer 404.

    Usage:
        client = MockHttpClient()
        client.set_response("GET", "https://api.example.com/x", HttpResponse(200, b"{}"))
        result = client.request("GET", "https://api.example.com/x")
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], HttpResponse | HttpError] = {}
        self.requests: list[RecordedRequest] = []

    def set_response(self, method: str, url: str, response: HttpResponse | HttpError) -> None:
        self._responses[(method.upper(), url)] = response

    def request(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[HttpResponse, HttpError]:
        self.requests.append(
            RecordedRequest(method=method.upper(), url=url, body=body, headers=dict(headers or {}))
        )

        response = self._responses.get((method.upper(), url))
        if response is None:
            return Ok(HttpResponse(status=404, body=b'{"message": "Not found (mock)"}'))
        if isinstance(response, HttpError):
            return Err(response)

        if progress and body is not None:
            progress(len(body), len(body))
        return Ok(response)
