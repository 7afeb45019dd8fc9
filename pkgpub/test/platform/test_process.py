from __future__ import annotations

import sys
from pathlib import Path

from pkgpub.core.result import Err, Ok
from pkgpub.platform.process import ProcessError, run


def test_run_returns_stdout(tmp_path: Path) -> None:
    result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)
    assert isinstance(result, Ok)
    assert result.value.strip() == "hello"


def test_run_extra_env(tmp_path: Path) -> None:
    result = run(
        [sys.executable, "-c", "import os; print(os.environ['PKGPUB_CANONICAL_URL'])"],
        cwd=tmp_path,
        extra_env={"PKGPUB_CANONICAL_URL": "https://hexdocs.pm/my_pkg"},
    )
    assert result == Ok("https://hexdocs.pm/my_pkg\n")


def test_run_failure(tmp_path: Path) -> None:
    result = run(
        [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"], cwd=tmp_path
    )
    assert isinstance(result, Err)
    assert result.error.returncode == 3
    assert result.error.stderr == "boom"


def test_run_missing_executable(tmp_path: Path) -> None:
    result = run(["pkgpub-definitely-not-a-command"], cwd=tmp_path)
    assert isinstance(result, Err)
    assert result.error.returncode == -1


def test_process_error_str() -> None:
    error = ProcessError(command=("a", "b", "c", "d"), returncode=1, stdout="", stderr="")
    assert str(error) == "a b c ... failed (exit 1)"


def test_stderr_tail() -> None:
    error = ProcessError(command=("make",), returncode=2, stdout="", stderr="warn\nmake: *** [html] Error 1\n\n")
    assert error.stderr_tail == "make: *** [html] Error 1"
    assert ProcessError(command=("make",), returncode=2, stdout="", stderr="").stderr_tail is None
