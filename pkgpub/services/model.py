from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal


class PublishTarget(StrEnum):
    RELEASE_ONLY = "package"
    DOCS_ONLY = "docs"
    BOTH = "both"

    @property
    def includes_release(self) -> bool:
        return self in (PublishTarget.RELEASE_ONLY, PublishTarget.BOTH)

    @property
    def includes_docs(self) -> bool:
        return self in (PublishTarget.DOCS_ONLY, PublishTarget.BOTH)


@dataclass(frozen=True, slots=True)
class PublishIntent:
    target: PublishTarget = PublishTarget.BOTH
    organization: str | None = None
    dry_run: bool = False
    replace: bool = False
    auto_confirm: bool = False
    progress: bool = True
    canonical: str | None = None


@dataclass(frozen=True, slots=True)
class SelfOwner:
    """The publishing user keeps ownership."""

    def __str__(self) -> str:
        return "yourself"


@dataclass(frozen=True, slots=True)
class OrganizationOwner:
    name: str

    def __str__(self) -> str:
        return self.name


OwnerSelection = SelfOwner | OrganizationOwner


# dry_run: the remote call was elided and treated as a success.
StepStatus = Literal["ok", "dry_run", "failed", "skipped", "not_found"]

PROCEED_STATUSES: frozenset[StepStatus] = frozenset({"ok", "dry_run"})


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    """What happened to each step of a publish invocation.

    ``None`` means the step was not part of the selected target.
    """

    aborted: bool = False
    release: StepStatus | None = None
    docs: StepStatus | None = None
    ownership: StepStatus | None = None

    @property
    def succeeded(self) -> bool:
        # Ownership transfer failure leaves a live package: reported, not fatal.
        return self.release not in ("failed", "not_found") and self.docs not in (
            "failed",
            "not_found",
        )


@dataclass(frozen=True, slots=True)
class RevertOutcome:
    release: StepStatus | None = None
    docs: StepStatus | None = None

    @property
    def succeeded(self) -> bool:
        # Docs that never existed are informational only.
        return self.release != "failed" and self.docs != "failed"
