"""Map the positional arguments and ``--revert`` onto a single workflow."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from pkgpub.core.result import Err, Ok, Result
from pkgpub.services.errors import PublishError
from pkgpub.services.model import PublishTarget

__all__ = ["Command", "USAGE", "resolve_command"]

USAGE = """Invalid arguments, expected one of:
pkgpub publish
pkgpub publish package
pkgpub publish docs"""


@dataclass(frozen=True, slots=True)
class Command:
    action: Literal["publish", "revert"]
    target: PublishTarget
    revert_version: str | None = None


def resolve_command(args: Sequence[str], revert: str | None) -> Result[Command, PublishError]:
    """Resolve one of the six supported invocations.

    ``--revert`` always selects the revert workflow; the positional argument
    only narrows what is published or reverted.
    """
    match list(args):
        case []:
            target = PublishTarget.BOTH
        case ["package"]:
            target = PublishTarget.RELEASE_ONLY
        case ["docs"]:
            target = PublishTarget.DOCS_ONLY
        case _:
            return Err(PublishError(kind="usage", message=USAGE))

    if revert is None:
        return Ok(Command(action="publish", target=target))

    version = revert.strip()
    if not version:
        return Err(PublishError(kind="usage", message="--revert requires a version"))
    return Ok(Command(action="revert", target=target, revert_version=version))
