"""Interactive input abstraction.

The owner negotiation reads from the terminal through ``PrompterProtocol``
so tests can script the answers with ``MockPrompter``.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

__all__ = ["PrompterProtocol", "TyperPrompter", "MockPrompter", "PromptExhausted"]


class PrompterProtocol(Protocol):
    def ask(self, message: str) -> str:
        """Read one line of input after showing ``message``."""
        ...

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question."""
        ...


class TyperPrompter:
    """Terminal prompts via typer (blocks until the user answers)."""

    def ask(self, message: str) -> str:
        import typer

        value: str = typer.prompt(message, default="", show_default=False)
        return value

    def confirm(self, message: str) -> bool:
        import typer

        return bool(typer.confirm(message, default=True))


class PromptExhausted(AssertionError):
    """Raised by MockPrompter when a test did not script enough answers."""


@dataclass
class MockPrompter:
    """Prompter returning scripted answers.

    Usage:
        prompter = MockPrompter(answers=["x", "2"])
        prompter.ask("Your selection")  # -> "x"
    """

    answers: Iterable[str] = ()
    confirmations: Iterable[bool] = ()
    asked: list[str] = field(default_factory=list)
    confirmed: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._answers: deque[str] = deque(self.answers)
        self._confirmations: deque[bool] = deque(self.confirmations)

    def ask(self, message: str) -> str:
        self.asked.append(message)
        if not self._answers:
            raise PromptExhausted(f"no scripted answer for prompt: {message}")
        return self._answers.popleft()

    def confirm(self, message: str) -> bool:
        self.confirmed.append(message)
        if not self._confirmations:
            raise PromptExhausted(f"no scripted confirmation for: {message}")
        return self._confirmations.popleft()
