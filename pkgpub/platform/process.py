"""Subprocess execution for the project's documentation generator.

    match run(["make", "html"], cwd=project_root, extra_env={"PKGPUB_CANONICAL_URL": url}):
        case Ok(_):
            ...
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pkgpub.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not start, timed out, or exited non-zero.

    Attributes:
        command: argv as executed
        returncode: Exit code, -1 when the process never completed
        stdout: Captured standard output
        stderr: Captured standard error
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def stderr_tail(self) -> str | None:
        """Last non-blank stderr line; generators usually put the cause there."""
        lines = [line for line in self.stderr.splitlines() if line.strip()]
        return lines[-1].strip() if lines else None

    def __str__(self) -> str:
        shown = " ".join(self.command[:3]) + (" ..." if len(self.command) > 3 else "")
        return f"{shown} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    extra_env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its stdout.

    ``extra_env`` is layered over the current environment.
    """
    env = {**os.environ, **extra_env} if extra_env else None

    def failed(returncode: int, stdout: str, stderr: str) -> Err[ProcessError]:
        return Err(ProcessError(tuple(cmd), returncode, stdout, stderr))

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return failed(-1, "", f"Command timed out after {timeout}s")
    except OSError as e:
        return failed(-1, "", str(e))

    if proc.returncode != 0:
        return failed(proc.returncode, proc.stdout, proc.stderr)
    return Ok(proc.stdout)
