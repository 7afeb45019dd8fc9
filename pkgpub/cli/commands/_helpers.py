"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from pkgpub.core.result import Err, Result
from pkgpub.output.errors import print_publish_error, publish_error_exit_code
from pkgpub.services.errors import PublishError

if TYPE_CHECKING:
    from pkgpub.output.console import ConsoleProtocol


T = TypeVar("T")


def exit_on_error(result: Result[T, PublishError], console: ConsoleProtocol) -> T:
    """Return the Ok value, or report the PublishError and exit.

    Replaces the common pattern:
        if isinstance(result, Err):
            console.error(result.error.message)
            raise typer.Exit(code=...)
        value = result.value
    """
    if isinstance(result, Err):
        print_publish_error(result.error, console)
        raise typer.Exit(code=publish_error_exit_code(result.error))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)
