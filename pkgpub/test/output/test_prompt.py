from __future__ import annotations

import pytest

from pkgpub.output.prompt import MockPrompter, PromptExhausted


def test_scripted_answers_in_order() -> None:
    prompter = MockPrompter(answers=["a", "b"], confirmations=[False])

    assert prompter.ask("first") == "a"
    assert prompter.ask("second") == "b"
    assert prompter.confirm("Proceed?") is False
    assert prompter.asked == ["first", "second"]
    assert prompter.confirmed == ["Proceed?"]


def test_exhausted() -> None:
    prompter = MockPrompter()
    with pytest.raises(PromptExhausted):
        prompter.ask("anything")
    with pytest.raises(PromptExhausted):
        prompter.confirm("Proceed?")
