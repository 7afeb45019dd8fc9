"""Owner negotiation before a package's first publication.

A new package is owned by whoever publishes it. When the publishing user
belongs to organizations, they can pick one of them as owner instead; the
ownership is transferred once the release is live. The choice is made once,
before any registry mutation, and never revisited.
"""

from __future__ import annotations

from pkgpub.core.config import Config
from pkgpub.core.result import Err, Ok, Result
from pkgpub.output.console import ConsoleProtocol, Style
from pkgpub.output.errors import print_registry_error
from pkgpub.output.prompt import PrompterProtocol
from pkgpub.project.build_info import print_build_info
from pkgpub.project.metadata import BuildMetadata
from pkgpub.registry.gateway import RegistryGatewayProtocol
from pkgpub.services.errors import UserAborted
from pkgpub.services.model import OrganizationOwner, OwnerSelection, PublishIntent, SelfOwner

__all__ = ["negotiate_owner", "resolve_owner_choice", "owner_menu"]


def owner_menu(organizations: list[str]) -> list[OwnerSelection]:
    """Menu entries in display order: yourself first, then each organization."""
    return [SelfOwner(), *(OrganizationOwner(org) for org in organizations)]


def resolve_owner_choice(token: str, organizations: list[str]) -> OwnerSelection | None:
    """Map a 1-based menu token to a selection, or None if it is not a valid option."""
    token = token.strip()
    # isdigit() also accepts superscripts and non-ASCII digits.
    if not (token.isascii() and token.isdecimal()):
        return None
    index = int(token)
    menu = owner_menu(organizations)
    if 1 <= index <= len(menu):
        return menu[index - 1]
    return None


def _package_exists(
    meta: BuildMetadata,
    organization: str | None,
    *,
    gateway: RegistryGatewayProtocol,
    console: ConsoleProtocol,
) -> bool:
    result = gateway.get_package(meta.name, organization=organization)
    if isinstance(result, Ok):
        return True
    if result.error.is_not_found:
        return False
    console.error(f"Failed to check if {meta.name} already exists, assuming it does not")
    print_registry_error(result.error, console)
    return False


def _user_organizations(
    *, gateway: RegistryGatewayProtocol, console: ConsoleProtocol
) -> list[str]:
    result = gateway.current_user_organizations()
    if isinstance(result, Ok):
        return result.value
    console.error("Failed to fetch your organizations, publishing as yourself")
    print_registry_error(result.error, console)
    return []


def _print_summary(
    meta: BuildMetadata, intent: PublishIntent, *, console: ConsoleProtocol, config: Config
) -> None:
    console.header(f"Building {meta.name} {meta.version}")
    print_build_info(meta, console)
    console.newline()
    if config.is_default_organization(intent.organization):
        console.print(f"Publishing package to public repository {config.default_organization}.")
    else:
        console.print(f"Publishing package to private repository {intent.organization}.")
    console.print(
        f"Before publishing, please read the Code of Conduct: {config.code_of_conduct_url}",
        Style.DIM,
    )


def _confirm(
    intent: PublishIntent, *, prompter: PrompterProtocol
) -> Result[None, UserAborted]:
    if intent.auto_confirm:
        return Ok(None)
    if prompter.confirm("Proceed?"):
        return Ok(None)
    return Err(UserAborted())


def _select_owner(
    organizations: list[str], *, console: ConsoleProtocol, prompter: PrompterProtocol
) -> OwnerSelection:
    console.newline()
    console.print("You are a member of one or multiple organizations. Who should own the package?")
    for i, choice in enumerate(owner_menu(organizations), start=1):
        console.print(f"  {i}. {choice}")

    while True:
        token = prompter.ask(f"Your selection [1-{len(organizations) + 1}]")
        selection = resolve_owner_choice(token, organizations)
        if selection is not None:
            return selection
        console.warning(f"invalid selection: {token.strip() or '(empty)'}")


def negotiate_owner(
    meta: BuildMetadata,
    intent: PublishIntent,
    *,
    gateway: RegistryGatewayProtocol,
    console: ConsoleProtocol,
    prompter: PrompterProtocol,
    config: Config,
) -> Result[OwnerSelection, UserAborted]:
    """Decide who owns the package and get the user's go-ahead.

    Rules, in order:

    1. An explicit non-default ``--organization`` owns the package.
    2. An already existing package keeps its owners (``SelfOwner``).
    3. Without organizations, or with ``--yes``, the publisher owns it.
    4. Otherwise a numbered menu picks the owner; the menu doubles as the
       confirmation.

    Cases 1-3 ask a single ``Proceed?`` unless ``auto_confirm`` is set.
    Lookup failures are printed and treated as "does not exist" and
    "no organizations".
    """
    _print_summary(meta, intent, console=console, config=config)

    if not config.is_default_organization(intent.organization):
        selection: OwnerSelection = OrganizationOwner(intent.organization or "")
        return _confirm(intent, prompter=prompter).map(lambda _: selection)

    if _package_exists(meta, intent.organization, gateway=gateway, console=console):
        return _confirm(intent, prompter=prompter).map(lambda _: SelfOwner())

    organizations = _user_organizations(gateway=gateway, console=console)
    if not organizations or intent.auto_confirm:
        return _confirm(intent, prompter=prompter).map(lambda _: SelfOwner())

    return Ok(_select_owner(organizations, console=console, prompter=prompter))
