"""Registry API operations used by the publish and revert workflows.

Every call returns exactly one of:

- ``Ok(RegistryResponse)`` for a 2xx response
- ``Err(RegistryError(kind="not_found"))`` for 404
- ``Err(RegistryError(kind="rejected"))`` for any other status, with the
  decoded server body as ``details``
- ``Err(RegistryError(kind="transport"))`` when no response was received
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Literal, Protocol
from urllib.parse import quote

from pkgpub.core.config import Config
from pkgpub.core.result import Err, Ok, Result
from pkgpub.core.structured import StrDict, as_str_dict, get_list, get_str
from pkgpub.registry.http import HttpClient, HttpResponse

__all__ = [
    "RegistryResponse",
    "RegistryError",
    "RegistryResult",
    "RegistryGatewayProtocol",
    "RegistryGateway",
    "MockRegistryGateway",
    "GatewayCall",
]

RegistryErrorKind = Literal["not_found", "rejected", "transport"]
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True, slots=True)
class RegistryResponse:
    status: int
    body: object = None
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RegistryError:
    """A registry call that did not succeed.

    Attributes:
        kind: not_found, rejected or transport
        message: Short description (server message when available)
        status: HTTP status, 0 for transport failures
        details: Decoded JSON error body, if any
    """

    kind: RegistryErrorKind
    message: str
    status: int = 0
    details: StrDict | None = None

    @property
    def is_not_found(self) -> bool:
        return self.kind == "not_found"


RegistryResult = Result[RegistryResponse, RegistryError]


class RegistryGatewayProtocol(Protocol):
    """Registry operations the orchestrators depend on."""

    def publish_release(
        self,
        name: str,
        data: bytes,
        *,
        organization: str | None = None,
        replace: bool = False,
        progress: ProgressCallback | None = None,
    ) -> RegistryResult:
        """Upload a release archive, creating the package if needed."""
        ...

    def delete_release(
        self, name: str, version: str, *, organization: str | None = None
    ) -> RegistryResult: ...

    def publish_docs(
        self,
        name: str,
        version: str,
        data: bytes,
        *,
        organization: str | None = None,
        progress: ProgressCallback | None = None,
    ) -> RegistryResult: ...

    def delete_docs(
        self, name: str, version: str, *, organization: str | None = None
    ) -> RegistryResult: ...

    def add_owner(
        self,
        name: str,
        owner: str,
        *,
        organization: str | None = None,
        level: str = "full",
        transfer: bool = False,
    ) -> RegistryResult:
        """Add ``owner`` to the package; ``transfer`` makes it the sole owner."""
        ...

    def get_package(self, name: str, *, organization: str | None = None) -> RegistryResult: ...

    def current_user_organizations(self) -> Result[list[str], RegistryError]:
        """Names of the organizations the authenticated user belongs to."""
        ...


def _decode_body(body: bytes) -> object:
    if not body:
        return None
    try:
        return json.loads(body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")


def classify_response(response: HttpResponse) -> RegistryResult:
    """Map an HTTP response onto the registry outcome variants."""
    body = _decode_body(response.body)
    if response.is_success:
        return Ok(RegistryResponse(status=response.status, body=body, headers=response.headers))

    details = as_str_dict(body)
    message = get_str(details, "message") if details is not None else None
    if message is None:
        message = body.strip() if isinstance(body, str) and body.strip() else f"HTTP {response.status}"
    kind: RegistryErrorKind = "not_found" if response.status == 404 else "rejected"
    return Err(RegistryError(kind=kind, message=message, status=response.status, details=details))


class RegistryGateway:
    """Registry API client.

    Args:
        http: Transport used for every request
        config: Endpoint, API key and default organization
    """

    def __init__(self, http: HttpClient, config: Config) -> None:
        self._http = http
        self._config = config

    def _url(self, path: str, organization: str | None) -> str:
        if not self._config.is_default_organization(organization):
            path = f"repos/{quote(organization or '', safe='')}/{path}"
        return f"{self._config.api_url}/{path}"

    def _headers(self, content_type: str | None = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.api_key:
            headers["Authorization"] = self._config.api_key
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def _send(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        content_type: str | None = None,
        progress: ProgressCallback | None = None,
    ) -> RegistryResult:
        result = self._http.request(
            method,
            url,
            body=body,
            headers=self._headers(content_type),
            progress=progress,
        )
        if isinstance(result, Err):
            return Err(RegistryError(kind="transport", message=result.error.message))
        return classify_response(result.value)

    def publish_release(
        self,
        name: str,
        data: bytes,
        *,
        organization: str | None = None,
        replace: bool = False,
        progress: ProgressCallback | None = None,
    ) -> RegistryResult:
        url = self._url(f"packages/{quote(name, safe='')}/releases", organization)
        if replace:
            url += "?replace=true"
        return self._send(
            "POST", url, body=data, content_type="application/octet-stream", progress=progress
        )

    def delete_release(
        self, name: str, version: str, *, organization: str | None = None
    ) -> RegistryResult:
        path = f"packages/{quote(name, safe='')}/releases/{quote(version, safe='')}"
        return self._send("DELETE", self._url(path, organization))

    def publish_docs(
        self,
        name: str,
        version: str,
        data: bytes,
        *,
        organization: str | None = None,
        progress: ProgressCallback | None = None,
    ) -> RegistryResult:
        path = f"packages/{quote(name, safe='')}/releases/{quote(version, safe='')}/docs"
        return self._send(
            "POST",
            self._url(path, organization),
            body=data,
            content_type="application/octet-stream",
            progress=progress,
        )

    def delete_docs(
        self, name: str, version: str, *, organization: str | None = None
    ) -> RegistryResult:
        path = f"packages/{quote(name, safe='')}/releases/{quote(version, safe='')}/docs"
        return self._send("DELETE", self._url(path, organization))

    def add_owner(
        self,
        name: str,
        owner: str,
        *,
        organization: str | None = None,
        level: str = "full",
        transfer: bool = False,
    ) -> RegistryResult:
        path = f"packages/{quote(name, safe='')}/owners/{quote(owner, safe='')}"
        body = json.dumps({"level": level, "transfer": transfer}).encode("utf-8")
        return self._send(
            "PUT", self._url(path, organization), body=body, content_type="application/json"
        )

    def get_package(self, name: str, *, organization: str | None = None) -> RegistryResult:
        return self._send("GET", self._url(f"packages/{quote(name, safe='')}", organization))

    def current_user_organizations(self) -> Result[list[str], RegistryError]:
        result = self._send("GET", f"{self._config.api_url}/users/me")
        if isinstance(result, Err):
            return result

        data = as_str_dict(result.value.body)
        if data is None:
            return Ok([])
        names: list[str] = []
        for item in get_list(data, "organizations") or []:
            org = as_str_dict(item)
            if org is None:
                continue
            name = get_str(org, "name")
            if name:
                names.append(name)
        return Ok(names)


@dataclass(frozen=True, slots=True)
class GatewayCall:
    """One recorded call on MockRegistryGateway."""

    op: str
    args: tuple[object, ...]
    kwargs: Mapping[str, object]


def _ok() -> RegistryResult:
    return Ok(RegistryResponse(status=200))


def _not_found() -> RegistryResult:
    return Err(RegistryError(kind="not_found", message="Page not found", status=404))


class MockRegistryGateway:
    """Gateway fake that records calls and returns scripted outcomes.

    Every mutating operation succeeds unless a result is set; ``get_package``
    answers not_found and ``current_user_organizations`` answers no
    organizations by default.

    Usage:
        gateway = MockRegistryGateway(organizations=["acme"])
        gateway.results["publish_release"] = Err(RegistryError("rejected", "boom", 422))
    """

    def __init__(
        self,
        *,
        organizations: list[str] | None = None,
        package_exists: bool = False,
    ) -> None:
        self.calls: list[GatewayCall] = []
        self.results: dict[str, RegistryResult] = {}
        self.organizations_result: Result[list[str], RegistryError] = Ok(
            list(organizations or [])
        )
        if package_exists:
            self.results["get_package"] = _ok()

    def _record(self, op: str, *args: object, **kwargs: object) -> None:
        self.calls.append(GatewayCall(op=op, args=args, kwargs=kwargs))

    def _result(self, op: str, default: RegistryResult) -> RegistryResult:
        return self.results.get(op, default)

    def ops(self) -> list[str]:
        """Names of the operations called, in order."""
        return [c.op for c in self.calls]

    def calls_to(self, op: str) -> list[GatewayCall]:
        return [c for c in self.calls if c.op == op]

    def publish_release(
        self,
        name: str,
        data: bytes,
        *,
        organization: str | None = None,
        replace: bool = False,
        progress: ProgressCallback | None = None,
    ) -> RegistryResult:
        self._record("publish_release", name, data, organization=organization, replace=replace)
        return self._result("publish_release", _ok())

    def delete_release(
        self, name: str, version: str, *, organization: str | None = None
    ) -> RegistryResult:
        self._record("delete_release", name, version, organization=organization)
        return self._result("delete_release", _ok())

    def publish_docs(
        self,
        name: str,
        version: str,
        data: bytes,
        *,
        organization: str | None = None,
        progress: ProgressCallback | None = None,
    ) -> RegistryResult:
        self._record("publish_docs", name, version, data, organization=organization)
        return self._result("publish_docs", _ok())

    def delete_docs(
        self, name: str, version: str, *, organization: str | None = None
    ) -> RegistryResult:
        self._record("delete_docs", name, version, organization=organization)
        return self._result("delete_docs", _ok())

    def add_owner(
        self,
        name: str,
        owner: str,
        *,
        organization: str | None = None,
        level: str = "full",
        transfer: bool = False,
    ) -> RegistryResult:
        self._record(
            "add_owner", name, owner, organization=organization, level=level, transfer=transfer
        )
        return self._result("add_owner", _ok())

    def get_package(self, name: str, *, organization: str | None = None) -> RegistryResult:
        self._record("get_package", name, organization=organization)
        return self._result("get_package", _not_found())

    def current_user_organizations(self) -> Result[list[str], RegistryError]:
        self._record("current_user_organizations")
        return self.organizations_result
