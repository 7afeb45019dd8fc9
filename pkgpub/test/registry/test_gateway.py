"""Tests for the registry gateway: endpoints, headers and outcome classification."""

from __future__ import annotations

import json

from pkgpub.core.config import Config
from pkgpub.core.result import Err, Ok
from pkgpub.registry.gateway import (
    MockRegistryGateway,
    RegistryError,
    RegistryGateway,
    classify_response,
)
from pkgpub.registry.http import HttpError, HttpResponse, MockHttpClient

API = "https://hex.pm/api"


def _gateway(client: MockHttpClient) -> RegistryGateway:
    return RegistryGateway(client, Config(api_key="secret-key"))


def _json(status: int, body: object) -> HttpResponse:
    return HttpResponse(status=status, body=json.dumps(body).encode("utf-8"))


class TestClassifyResponse:
    def test_success_decodes_json(self) -> None:
        result = classify_response(_json(201, {"name": "my_pkg"}))
        assert isinstance(result, Ok)
        assert result.value.status == 201
        assert result.value.body == {"name": "my_pkg"}

    def test_404_is_not_found(self) -> None:
        result = classify_response(_json(404, {"message": "Page not found"}))
        assert isinstance(result, Err)
        assert result.error.kind == "not_found"
        assert result.error.is_not_found
        assert result.error.message == "Page not found"

    def test_other_status_is_rejected_with_details(self) -> None:
        body = {"message": "Validation error(s)", "errors": {"inserted_at": "can only modify a release up to one hour after creation"}}
        result = classify_response(_json(422, body))
        assert isinstance(result, Err)
        assert result.error.kind == "rejected"
        assert result.error.status == 422
        assert result.error.details == body

    def test_non_json_body(self) -> None:
        result = classify_response(HttpResponse(status=500, body=b"Internal Server Error"))
        assert isinstance(result, Err)
        assert result.error.message == "Internal Server Error"
        assert result.error.details is None

    def test_empty_body(self) -> None:
        result = classify_response(HttpResponse(status=401))
        assert isinstance(result, Err)
        assert result.error.message == "HTTP 401"


class TestEndpoints:
    def test_publish_release(self) -> None:
        client = MockHttpClient()
        client.set_response("POST", f"{API}/packages/my_pkg/releases", HttpResponse(201))

        result = _gateway(client).publish_release("my_pkg", b"tarball")

        assert isinstance(result, Ok)
        request = client.requests[0]
        assert request.body == b"tarball"
        assert request.headers["Authorization"] == "secret-key"
        assert request.headers["Content-Type"] == "application/octet-stream"
        assert request.headers["Accept"] == "application/json"

    def test_publish_release_replace(self) -> None:
        client = MockHttpClient()
        _gateway(client).publish_release("my_pkg", b"t", replace=True)
        assert client.requests[0].url == f"{API}/packages/my_pkg/releases?replace=true"

    def test_organization_prefix(self) -> None:
        client = MockHttpClient()
        _gateway(client).publish_release("my_pkg", b"t", organization="acme")
        assert client.requests[0].url == f"{API}/repos/acme/packages/my_pkg/releases"

    def test_default_organization_has_no_prefix(self) -> None:
        client = MockHttpClient()
        _gateway(client).get_package("my_pkg", organization="hexpm")
        assert client.requests[0].url == f"{API}/packages/my_pkg"

    def test_delete_release_and_docs(self) -> None:
        client = MockHttpClient()
        gateway = _gateway(client)
        gateway.delete_release("my_pkg", "1.2.3")
        gateway.delete_docs("my_pkg", "1.2.3")
        assert [(r.method, r.url) for r in client.requests] == [
            ("DELETE", f"{API}/packages/my_pkg/releases/1.2.3"),
            ("DELETE", f"{API}/packages/my_pkg/releases/1.2.3/docs"),
        ]

    def test_publish_docs(self) -> None:
        client = MockHttpClient()
        _gateway(client).publish_docs("my_pkg", "1.2.3", b"docs")
        request = client.requests[0]
        assert (request.method, request.url) == ("POST", f"{API}/packages/my_pkg/releases/1.2.3/docs")
        assert request.body == b"docs"

    def test_add_owner_body(self) -> None:
        client = MockHttpClient()
        client.set_response("PUT", f"{API}/packages/my_pkg/owners/acme", HttpResponse(204))

        result = _gateway(client).add_owner("my_pkg", "acme", level="full", transfer=True)

        assert isinstance(result, Ok)
        request = client.requests[0]
        assert json.loads(request.body or b"") == {"level": "full", "transfer": True}
        assert request.headers["Content-Type"] == "application/json"

    def test_owner_is_url_quoted(self) -> None:
        client = MockHttpClient()
        _gateway(client).add_owner("my_pkg", "me@example.com")
        assert client.requests[0].url == f"{API}/packages/my_pkg/owners/me%40example.com"

    def test_missing_api_key_sends_no_authorization(self) -> None:
        client = MockHttpClient()
        RegistryGateway(client, Config()).get_package("my_pkg")
        assert "Authorization" not in client.requests[0].headers

    def test_transport_failure(self) -> None:
        client = MockHttpClient()
        client.set_response(
            "GET", f"{API}/packages/my_pkg", HttpError(f"{API}/packages/my_pkg", "Request timed out")
        )
        result = _gateway(client).get_package("my_pkg")
        assert result == Err(RegistryError(kind="transport", message="Request timed out"))


class TestCurrentUserOrganizations:
    def test_names_in_order(self) -> None:
        client = MockHttpClient()
        client.set_response(
            "GET",
            f"{API}/users/me",
            _json(200, {"username": "me", "organizations": [{"name": "acme"}, {"name": "beta"}, {}]}),
        )
        assert _gateway(client).current_user_organizations() == Ok(["acme", "beta"])

    def test_no_organizations_key(self) -> None:
        client = MockHttpClient()
        client.set_response("GET", f"{API}/users/me", _json(200, {"username": "me"}))
        assert _gateway(client).current_user_organizations() == Ok([])

    def test_failure_is_propagated(self) -> None:
        client = MockHttpClient()
        client.set_response("GET", f"{API}/users/me", _json(401, {"message": "invalid API key"}))
        result = _gateway(client).current_user_organizations()
        assert isinstance(result, Err)
        assert result.error.kind == "rejected"


class TestMockRegistryGateway:
    def test_defaults(self) -> None:
        gateway = MockRegistryGateway()
        assert isinstance(gateway.publish_release("p", b""), Ok)
        assert isinstance(gateway.get_package("p"), Err)
        assert gateway.current_user_organizations() == Ok([])
        assert gateway.ops() == ["publish_release", "get_package", "current_user_organizations"]

    def test_package_exists(self) -> None:
        gateway = MockRegistryGateway(package_exists=True)
        assert isinstance(gateway.get_package("p"), Ok)

    def test_scripted_result(self) -> None:
        gateway = MockRegistryGateway()
        failure = Err(RegistryError(kind="rejected", message="nope", status=422))
        gateway.results["delete_release"] = failure
        assert gateway.delete_release("p", "1.0.0") == failure
        assert gateway.calls_to("delete_release")[0].args == ("p", "1.0.0")
