"""Revert workflow: delete a published release and/or its docs.

Eligibility (time window, already reverted, ...) is decided by the registry;
this module only routes the requests and reports the outcome. Release and
docs are independent resources, so a failure on one never prevents the
attempt on the other.
"""

from __future__ import annotations

from pkgpub.core.result import Ok
from pkgpub.core.semver import clean_version
from pkgpub.output.console import ConsoleProtocol
from pkgpub.output.errors import print_registry_error
from pkgpub.registry.gateway import RegistryGatewayProtocol
from pkgpub.services.model import PublishTarget, RevertOutcome, StepStatus

__all__ = ["revert", "revert_release", "revert_docs"]


def revert_release(
    name: str,
    version: str,
    organization: str | None,
    *,
    gateway: RegistryGatewayProtocol,
    console: ConsoleProtocol,
) -> StepStatus:
    result = gateway.delete_release(name, version, organization=organization)
    if isinstance(result, Ok):
        console.success(f"Reverted {name} {version}")
        return "ok"

    console.error(f"Reverting {name} {version} failed")
    print_registry_error(result.error, console)
    return "failed"


def revert_docs(
    name: str,
    version: str,
    organization: str | None,
    *,
    gateway: RegistryGatewayProtocol,
    console: ConsoleProtocol,
) -> StepStatus:
    result = gateway.delete_docs(name, version, organization=organization)
    if isinstance(result, Ok):
        console.success(f"Reverted docs for {name} {version}")
        return "ok"

    if result.error.is_not_found:
        console.info(f"Docs for {name} {version} did not exist")
        return "not_found"

    console.error(f"Reverting docs for {name} {version} failed")
    print_registry_error(result.error, console)
    return "failed"


def revert(
    target: PublishTarget,
    name: str,
    version: str,
    organization: str | None,
    *,
    gateway: RegistryGatewayProtocol,
    console: ConsoleProtocol,
) -> RevertOutcome:
    """Revert the release, the docs, or both (release first).

    A leading ``v`` in ``version`` is ignored.
    """
    version = clean_version(version)
    release: StepStatus | None = None
    docs: StepStatus | None = None

    if target.includes_release:
        console.info("Reverting package...")
        release = revert_release(name, version, organization, gateway=gateway, console=console)

    if target.includes_docs:
        console.info("Reverting docs...")
        docs = revert_docs(name, version, organization, gateway=gateway, console=console)

    return RevertOutcome(release=release, docs=docs)
