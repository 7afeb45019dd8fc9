from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from pkgpub.core.config import Config, config_path, load_config_or_default
from pkgpub.core.errors import ErrorCode
from pkgpub.core.result import Err
from pkgpub.output.console import ConsoleProtocol, RichConsole
from pkgpub.output.prompt import PrompterProtocol, TyperPrompter
from pkgpub.registry.gateway import RegistryGateway, RegistryGatewayProtocol
from pkgpub.registry.http import RealHttpClient


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    prompter: PrompterProtocol
    gateway: RegistryGatewayProtocol
    project_root: Path


def build_context(*, require_auth: bool = True) -> CLIContext:
    config_result = load_config_or_default()
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config = config_result.value
    if require_auth and not config.api_key:
        typer.echo("error: no API key configured", err=True)
        typer.echo(
            f"hint: set api_key in {config_path()} or export PKGPUB_API_KEY",
            err=True,
        )
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    http = RealHttpClient(timeout=config.http_timeout)
    return CLIContext(
        config=config,
        console=RichConsole(),
        prompter=TyperPrompter(),
        gateway=RegistryGateway(http, config),
        project_root=Path.cwd(),
    )
