"""Tests for error rendering and exit code mapping."""

from __future__ import annotations

import pytest

from pkgpub.core.errors import ErrorCode
from pkgpub.output.console import MockConsole
from pkgpub.output.errors import (
    http_status_text,
    print_publish_error,
    print_registry_error,
    publish_error_exit_code,
)
from pkgpub.registry.gateway import RegistryError
from pkgpub.services.errors import PublishError


def test_http_status_text() -> None:
    assert http_status_text(401) == "Authentication failed (401)"
    assert http_status_text(429) == "API rate limit exceeded (429)"
    assert http_status_text(500) == "HTTP status code: 500"


class TestPrintRegistryError:
    def test_transport(self) -> None:
        console = MockConsole()
        print_registry_error(RegistryError(kind="transport", message="Connection refused"), console)
        assert console.messages == ["  transport error: Connection refused"]

    def test_nested_details(self) -> None:
        console = MockConsole()
        error = RegistryError(
            kind="rejected",
            message="Validation error(s)",
            status=422,
            details={
                "message": "Validation error(s)",
                "errors": {"requirements": {"jason": "Failed to use jason"}, "name": "reserved"},
            },
        )

        print_registry_error(error, console)

        assert console.messages == [
            "  Validation failed (422)",
            "  Validation error(s)",
            "  requirements:",
            "    jason: Failed to use jason",
            "  name: reserved",
        ]

    def test_generic_message_not_repeated(self) -> None:
        console = MockConsole()
        print_registry_error(RegistryError(kind="rejected", message="HTTP 500", status=500), console)
        assert console.messages == ["  HTTP status code: 500"]


def test_print_publish_error_with_hint() -> None:
    console = MockConsole()
    print_publish_error(PublishError(kind="missing_docs", message="no docs", hint="add doc/"), console)
    assert console.messages == ["error: no docs", "hint: add doc/"]


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("usage", ErrorCode.USER_ERROR),
        ("invalid_manifest", ErrorCode.PRECONDITION_ERROR),
        ("missing_docs", ErrorCode.PRECONDITION_ERROR),
        ("missing_index", ErrorCode.PRECONDITION_ERROR),
        ("invalid_docs_tree", ErrorCode.PRECONDITION_ERROR),
        ("docs_command_failed", ErrorCode.PRECONDITION_ERROR),
        ("io_error", ErrorCode.IO_ERROR),
    ],
)
def test_exit_codes(kind: str, code: ErrorCode) -> None:
    error = PublishError(kind=kind, message="m")  # type: ignore[arg-type]
    assert publish_error_exit_code(error) == int(code)
