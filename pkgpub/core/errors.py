"""Exit codes for the pkgpub command.

Every failure path of the CLI ends with one of these codes so the command
can be used from scripts and CI pipelines.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    - 0: Success (also used when the user declines a confirmation)
    - 1: Usage error (invalid arguments)
    - 2: Environment error (missing config, missing API key)
    - 3: Precondition error (manifest, docs tree, docs build)
    - 4: Remote error (registry rejected the request, or transport failed)
    - 5: I/O error (file could not be read)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    PRECONDITION_ERROR = 3
    REMOTE_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
