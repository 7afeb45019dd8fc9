"""Output abstraction layer: console, prompts, progress."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .prompt import MockPrompter, PrompterProtocol, TyperPrompter

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "MockPrompter",
    "PrompterProtocol",
    "TyperPrompter",
]
