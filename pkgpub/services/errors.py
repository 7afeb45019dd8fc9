from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PublishErrorKind = Literal[
    "usage",
    "invalid_manifest",
    "missing_docs",
    "missing_index",
    "invalid_docs_tree",
    "docs_command_failed",
    "io_error",
]


@dataclass(frozen=True, slots=True)
class PublishError:
    """Local failure detected before (or instead of) any registry mutation."""

    kind: PublishErrorKind
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class UserAborted:
    """The user declined a confirmation prompt."""

    message: str = "Aborted by user"
