"""Publish workflow: release, docs and ownership transfer.

Steps, each depending on the previous one:

    negotiate owner -> build archives -> publish release -> publish docs
                                                          -> transfer ownership

All local work (owner choice, docs generation, both archives) happens before
the first mutating registry call, so a local failure never leaves a
half-published version behind. A failed release publish stops the run: no
docs upload and no ownership change follow it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path

from pkgpub.core.config import Config
from pkgpub.core.result import Err, Ok, Result
from pkgpub.output.console import ConsoleProtocol, Style
from pkgpub.output.errors import print_registry_error
from pkgpub.output.progress import upload_progress
from pkgpub.output.prompt import PrompterProtocol
from pkgpub.platform.process import ProcessError
from pkgpub.platform.process import run as run_process
from pkgpub.project.metadata import BuildMetadata
from pkgpub.registry.gateway import RegistryGatewayProtocol
from pkgpub.registry.urls import docs_url, package_url
from pkgpub.services.archive import ArchiveArtifact, build_release
from pkgpub.services.docs import build_docs, find_docs_dir
from pkgpub.services.errors import PublishError
from pkgpub.services.model import (
    PROCEED_STATUSES,
    OrganizationOwner,
    OwnerSelection,
    PublishIntent,
    PublishOutcome,
    SelfOwner,
    StepStatus,
)
from pkgpub.services.owner import negotiate_owner

__all__ = ["PublishOrchestrator", "CANONICAL_URL_ENV"]

CANONICAL_URL_ENV = "PKGPUB_CANONICAL_URL"

CommandRunner = Callable[[list[str], Path, Mapping[str, str]], Result[str, ProcessError]]


def _run_docs_command(cmd: list[str], cwd: Path, env: Mapping[str, str]) -> Result[str, ProcessError]:
    return run_process(cmd, cwd, env)


class PublishOrchestrator:
    """Drives one publish invocation.

    Args:
        gateway: Registry operations
        console: Output
        prompter: Interactive input for owner negotiation
        config: Registry URLs and default organization
        run_command: Runs the docs generator (injectable for tests)
    """

    def __init__(
        self,
        *,
        gateway: RegistryGatewayProtocol,
        console: ConsoleProtocol,
        prompter: PrompterProtocol,
        config: Config,
        run_command: CommandRunner = _run_docs_command,
    ) -> None:
        self.gateway = gateway
        self.console = console
        self.prompter = prompter
        self.config = config
        self.run_command = run_command

    def publish(
        self, meta: BuildMetadata, intent: PublishIntent, project_root: Path
    ) -> Result[PublishOutcome, PublishError]:
        """Run the workflow for ``intent.target``.

        Returns:
            Err(PublishError) for local precondition failures (nothing was
            published), otherwise Ok(PublishOutcome) with per-step status.
        """
        target = intent.target
        owner: OwnerSelection = SelfOwner()

        if target.includes_release:
            negotiated = negotiate_owner(
                meta,
                intent,
                gateway=self.gateway,
                console=self.console,
                prompter=self.prompter,
                config=self.config,
            )
            if isinstance(negotiated, Err):
                self.console.print(negotiated.error.message, Style.DIM)
                return Ok(PublishOutcome(aborted=True))
            owner = negotiated.value

        release: ArchiveArtifact | None = None
        if target.includes_release:
            release = build_release(meta)
            self.console.print(
                f"Release archive: {release.size} bytes, checksum {release.checksum_hex}",
                Style.DIM,
            )

        docs: ArchiveArtifact | None = None
        if target.includes_docs:
            docs_result = self._prepare_docs(meta, intent, project_root)
            if isinstance(docs_result, Err):
                return docs_result
            docs = docs_result.value

        release_status: StepStatus | None = None
        if release is not None:
            release_status = self._publish_release(meta, intent, release)
            if release_status not in PROCEED_STATUSES:
                return Ok(
                    PublishOutcome(
                        release=release_status,
                        docs="skipped" if docs is not None else None,
                        ownership="skipped",
                    )
                )

        docs_status: StepStatus | None = None
        if docs is not None:
            docs_status = self._publish_docs(meta, intent, docs)

        ownership_status: StepStatus | None = None
        if target.includes_release:
            ownership_status = self._transfer_ownership(meta, intent, owner)

        return Ok(
            PublishOutcome(release=release_status, docs=docs_status, ownership=ownership_status)
        )

    def _prepare_docs(
        self, meta: BuildMetadata, intent: PublishIntent, project_root: Path
    ) -> Result[ArchiveArtifact, PublishError]:
        if meta.docs_command:
            self.console.info("Building docs...")
            canonical = intent.canonical or docs_url(
                self.config, meta.name, organization=intent.organization
            )
            ran = self.run_command(
                list(meta.docs_command), project_root, {CANONICAL_URL_ENV: canonical}
            )
            if isinstance(ran, Err):
                return Err(
                    PublishError(
                        kind="docs_command_failed",
                        message=f"Building docs failed: {ran.error}",
                        hint=ran.error.stderr_tail,
                    )
                )

        doc_root = find_docs_dir(project_root)
        if isinstance(doc_root, Err):
            return doc_root
        return build_docs(doc_root.value)

    def _publish_release(
        self, meta: BuildMetadata, intent: PublishIntent, release: ArchiveArtifact
    ) -> StepStatus:
        self.console.info("Publishing package...")
        if intent.dry_run:
            self.console.print(
                f"Dry run: skipped publishing {meta.name} {meta.version} ({release.checksum_hex})",
                Style.WARNING,
            )
            return "dry_run"

        with upload_progress(intent.progress, release.size) as progress:
            result = self.gateway.publish_release(
                meta.name,
                release.data,
                organization=intent.organization,
                replace=intent.replace,
                progress=progress,
            )

        if isinstance(result, Ok):
            location = package_url(self.config, meta.name, meta.version, intent.organization)
            self.console.success(f"Package published to {location} ({release.checksum_hex})")
            return "ok"

        self.console.error("Publishing failed")
        print_registry_error(result.error, self.console)
        return "failed"

    def _publish_docs(
        self, meta: BuildMetadata, intent: PublishIntent, docs: ArchiveArtifact
    ) -> StepStatus:
        self.console.info("Publishing docs...")
        if intent.dry_run:
            self.console.print(
                f"Dry run: skipped publishing docs for {meta.name} {meta.version} ({docs.size} bytes)",
                Style.WARNING,
            )
            return "dry_run"

        with upload_progress(intent.progress, docs.size) as progress:
            result = self.gateway.publish_docs(
                meta.name,
                meta.version,
                docs.data,
                organization=intent.organization,
                progress=progress,
            )

        if isinstance(result, Ok):
            location = docs_url(self.config, meta.name, meta.version, intent.organization)
            self.console.success(f"Docs published to {location}")
            return "ok"

        if result.error.is_not_found:
            self.console.error(
                "Publishing docs failed due to the package not being published yet"
            )
            return "not_found"

        self.console.error("Publishing docs failed")
        print_registry_error(result.error, self.console)
        return "failed"

    def _transfer_ownership(
        self, meta: BuildMetadata, intent: PublishIntent, owner: OwnerSelection
    ) -> StepStatus:
        if not isinstance(owner, OrganizationOwner):
            return "ok"

        self.console.info(f"Transferring ownership to {owner.name}...")
        if intent.dry_run:
            self.console.print(
                f"Dry run: skipped transferring ownership to {owner.name}", Style.WARNING
            )
            return "dry_run"

        result = self.gateway.add_owner(
            meta.name,
            owner.name,
            organization=intent.organization,
            level="full",
            transfer=True,
        )
        if isinstance(result, Ok):
            self.console.success(f"{owner.name} now owns {meta.name}")
            return "ok"

        self.console.error(f"Transferring ownership to {owner.name} failed")
        print_registry_error(result.error, self.console)
        self.console.warning(
            f"{meta.name} {meta.version} is published, but ownership was not transferred. "
            f"Add {owner.name} as owner of {meta.name} separately."
        )
        return "failed"
