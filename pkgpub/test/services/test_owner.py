"""Tests for owner negotiation."""

from __future__ import annotations

import pytest

from pkgpub.core.config import Config
from pkgpub.core.result import Err, Ok
from pkgpub.output.console import MockConsole
from pkgpub.output.prompt import MockPrompter, PromptExhausted
from pkgpub.project.metadata import BuildMetadata
from pkgpub.registry.gateway import MockRegistryGateway, RegistryError
from pkgpub.services.errors import UserAborted
from pkgpub.services.model import OrganizationOwner, PublishIntent, SelfOwner
from pkgpub.services.owner import negotiate_owner, owner_menu, resolve_owner_choice

META = BuildMetadata(name="my_pkg", version="1.0.0", files=(("lib/a.py", b"a"),))


def _negotiate(
    gateway: MockRegistryGateway,
    prompter: MockPrompter,
    intent: PublishIntent | None = None,
    console: MockConsole | None = None,
):
    return negotiate_owner(
        META,
        intent or PublishIntent(),
        gateway=gateway,
        console=console or MockConsole(),
        prompter=prompter,
        config=Config(),
    )


class TestResolveOwnerChoice:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("1", SelfOwner()),
            ("2", OrganizationOwner("acme")),
            (" 3 ", OrganizationOwner("beta")),
            ("0", None),
            ("4", None),
            ("acme", None),
            ("", None),
            ("-1", None),
            ("\u00b2", None),
            ("\u0661", None),
        ],
    )
    def test_tokens(self, token: str, expected: object) -> None:
        assert resolve_owner_choice(token, ["acme", "beta"]) == expected

    def test_menu_order(self) -> None:
        assert [str(o) for o in owner_menu(["acme", "beta"])] == ["yourself", "acme", "beta"]


class TestNegotiateOwner:
    def test_menu_selection(self) -> None:
        console = MockConsole()
        prompter = MockPrompter(answers=["2"])
        gateway = MockRegistryGateway(organizations=["acme"])

        result = _negotiate(gateway, prompter, console=console)

        assert result == Ok(OrganizationOwner("acme"))
        assert prompter.asked == ["Your selection [1-2]"]
        assert prompter.confirmed == []
        assert "  1. yourself" in console.messages
        assert "  2. acme" in console.messages

    def test_invalid_selection_prompts_again(self) -> None:
        console = MockConsole()
        prompter = MockPrompter(answers=["9", "x", "1"])
        gateway = MockRegistryGateway(organizations=["acme", "beta"])

        result = _negotiate(gateway, prompter, console=console)

        assert result == Ok(SelfOwner())
        assert len(prompter.asked) == 3
        assert "warning: invalid selection: 9" in console.messages
        assert "warning: invalid selection: x" in console.messages

    def test_non_ascii_digits_prompt_again(self) -> None:
        console = MockConsole()
        prompter = MockPrompter(answers=["\u00b2", "\u0661", "2"])
        gateway = MockRegistryGateway(organizations=["acme"])

        result = _negotiate(gateway, prompter, console=console)

        assert result == Ok(OrganizationOwner("acme"))
        assert len(prompter.asked) == 3
        assert len(console.find("invalid selection")) == 2

    def test_explicit_organization(self) -> None:
        prompter = MockPrompter(confirmations=[True])
        gateway = MockRegistryGateway(organizations=["acme", "beta"])

        result = _negotiate(gateway, prompter, PublishIntent(organization="acme"))

        assert result == Ok(OrganizationOwner("acme"))
        assert prompter.confirmed == ["Proceed?"]
        assert gateway.ops() == []

    def test_default_organization_counts_as_unset(self) -> None:
        prompter = MockPrompter(answers=["1"])
        gateway = MockRegistryGateway(organizations=["acme"])

        result = _negotiate(gateway, prompter, PublishIntent(organization="hexpm"))

        assert result == Ok(SelfOwner())
        assert gateway.ops() == ["get_package", "current_user_organizations"]

    def test_existing_package_keeps_owners(self) -> None:
        prompter = MockPrompter(confirmations=[True])
        gateway = MockRegistryGateway(organizations=["acme"], package_exists=True)

        result = _negotiate(gateway, prompter)

        assert result == Ok(SelfOwner())
        assert prompter.asked == []
        assert gateway.ops() == ["get_package"]

    def test_no_organizations(self) -> None:
        prompter = MockPrompter(confirmations=[True])
        result = _negotiate(MockRegistryGateway(), prompter)
        assert result == Ok(SelfOwner())
        assert prompter.confirmed == ["Proceed?"]

    def test_declined(self) -> None:
        prompter = MockPrompter(confirmations=[False])
        result = _negotiate(MockRegistryGateway(), prompter)
        assert result == Err(UserAborted())

    def test_auto_confirm_skips_menu_and_prompt(self) -> None:
        prompter = MockPrompter()
        gateway = MockRegistryGateway(organizations=["acme"])

        result = _negotiate(gateway, prompter, PublishIntent(auto_confirm=True))

        assert result == Ok(SelfOwner())
        assert prompter.asked == []
        assert prompter.confirmed == []

    def test_lookup_failures_degrade(self) -> None:
        console = MockConsole()
        prompter = MockPrompter(confirmations=[True])
        gateway = MockRegistryGateway()
        failure = Err(RegistryError(kind="transport", message="connection refused"))
        gateway.results["get_package"] = failure
        gateway.organizations_result = failure

        result = _negotiate(gateway, prompter, console=console)

        assert result == Ok(SelfOwner())
        assert console.has_error()
        assert "  transport error: connection refused" in console.messages

    def test_summary_is_printed(self) -> None:
        console = MockConsole()
        _negotiate(MockRegistryGateway(), MockPrompter(confirmations=[True]), console=console)

        assert console.messages[0] == "Building my_pkg 1.0.0"
        assert "Publishing package to public repository hexpm." in console.messages
        assert console.find("Code of Conduct")

    def test_private_repository_summary(self) -> None:
        console = MockConsole()
        _negotiate(
            MockRegistryGateway(),
            MockPrompter(confirmations=[True]),
            PublishIntent(organization="acme"),
            console=console,
        )
        assert "Publishing package to private repository acme." in console.messages

    def test_unscripted_prompt_fails_loudly(self) -> None:
        with pytest.raises(PromptExhausted):
            _negotiate(MockRegistryGateway(organizations=["acme"]), MockPrompter())
