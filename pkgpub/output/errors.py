"""Error presentation utilities.

Centralized rendering of registry failures and local errors, plus the
exit code mapping, so every command reports failures the same way.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from pkgpub.core.errors import ErrorCode
from pkgpub.core.structured import as_str_dict
from pkgpub.output.console import Style
from pkgpub.registry.gateway import RegistryError
from pkgpub.services.errors import PublishError

if TYPE_CHECKING:
    from pkgpub.output.console import ConsoleProtocol

__all__ = [
    "print_registry_error",
    "print_publish_error",
    "publish_error_exit_code",
    "http_status_text",
]

_STATUS_TEXT = {
    401: "Authentication failed",
    403: "Forbidden",
    404: "Entity not found",
    422: "Validation failed",
    429: "API rate limit exceeded",
}


def http_status_text(status: int) -> str:
    text = _STATUS_TEXT.get(status)
    if text is None:
        return f"HTTP status code: {status}"
    return f"{text} ({status})"


def _print_errors(errors: Mapping[str, object], console: ConsoleProtocol, depth: int = 0) -> None:
    indent = "  " * (depth + 1)
    for key, value in errors.items():
        nested = as_str_dict(value)
        if nested is not None:
            console.print(f"{indent}{key}:", Style.DIM)
            _print_errors(nested, console, depth + 1)
        else:
            console.print(f"{indent}{key}: {value}", Style.DIM)


def print_registry_error(error: RegistryError, console: ConsoleProtocol) -> None:
    """Print whatever detail the registry (or transport) gave us."""
    if error.kind == "transport":
        console.print(f"  transport error: {error.message}", Style.DIM)
        return

    console.print(f"  {http_status_text(error.status)}", Style.DIM)
    details = error.details or {}
    message = details.get("message")
    if isinstance(message, str) and message:
        console.print(f"  {message}", Style.DIM)
    elif error.message and not error.message.startswith("HTTP "):
        console.print(f"  {error.message}", Style.DIM)

    errors = as_str_dict(details.get("errors"))
    if errors:
        _print_errors(errors, console)


def print_publish_error(error: PublishError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def publish_error_exit_code(error: PublishError) -> int:
    match error.kind:
        case "usage":
            return int(ErrorCode.USER_ERROR)
        case "io_error":
            return int(ErrorCode.IO_ERROR)
        case "invalid_manifest" | "missing_docs" | "missing_index" | "invalid_docs_tree":
            return int(ErrorCode.PRECONDITION_ERROR)
        case "docs_command_failed":
            return int(ErrorCode.PRECONDITION_ERROR)
    return int(ErrorCode.USER_ERROR)
