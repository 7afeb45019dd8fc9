from __future__ import annotations

import typer

from pkgpub.cli.commands._helpers import exit_on_error, exit_with_code
from pkgpub.cli.context import build_context
from pkgpub.cli.dispatch import resolve_command
from pkgpub.core.errors import ErrorCode
from pkgpub.core.result import Err
from pkgpub.project.metadata import load_build_metadata
from pkgpub.services.model import PublishIntent
from pkgpub.services.publish import PublishOrchestrator
from pkgpub.services.revert import revert as revert_version


def publish(
    args: list[str] | None = typer.Argument(
        None, metavar="[package|docs]", help="Publish only the package or only the docs"
    ),
    revert: str | None = typer.Option(
        None, "--revert", metavar="VERSION", help="Revert given version"
    ),
    organization: str | None = typer.Option(
        None, "--organization", help="Organization (private repository) to publish to"
    ),
    yes: bool = typer.Option(False, "--yes", help="Publish without asking for confirmation"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Build everything but do not publish anything"
    ),
    replace: bool = typer.Option(
        False, "--replace", help="Allow overwriting an already published version"
    ),
    progress: bool = typer.Option(
        True, "--progress/--no-progress", help="Show upload progress"
    ),
    canonical: str | None = typer.Option(
        None, "--canonical", help="Canonical docs URL passed to the docs command"
    ),
) -> None:
    """Publish a new package version and its documentation.

    A published version can be reverted with --revert while the registry
    still allows it.
    """
    command_result = resolve_command(args or [], revert)
    if isinstance(command_result, Err):
        typer.echo(f"error: {command_result.error.message}", err=True)
        exit_with_code(int(ErrorCode.USER_ERROR))
    command = command_result.value

    ctx = build_context(require_auth=not (command.action == "publish" and dry_run))
    meta = exit_on_error(load_build_metadata(ctx.project_root), ctx.console)

    if command.action == "revert":
        outcome = revert_version(
            command.target,
            meta.name,
            command.revert_version or "",
            organization,
            gateway=ctx.gateway,
            console=ctx.console,
        )
        if not outcome.succeeded:
            exit_with_code(int(ErrorCode.REMOTE_ERROR))
        return

    intent = PublishIntent(
        target=command.target,
        organization=organization,
        dry_run=dry_run,
        replace=replace,
        auto_confirm=yes,
        progress=progress,
        canonical=canonical,
    )
    orchestrator = PublishOrchestrator(
        gateway=ctx.gateway,
        console=ctx.console,
        prompter=ctx.prompter,
        config=ctx.config,
    )
    outcome = exit_on_error(orchestrator.publish(meta, intent, ctx.project_root), ctx.console)
    if not outcome.succeeded:
        exit_with_code(int(ErrorCode.REMOTE_ERROR))
