"""Exit codes for the relpack CLI.

A CI job can tell a bad config (1) apart from a missing Erlang install (2),
a broken release tree (3), a failing plugin (4) and a full disk (5).
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. The numbers are part of the CLI contract."""

    OK = 0
    USER_ERROR = 1  # bad config file or arguments
    ENV_ERROR = 2  # no usable Erlang runtime
    BUILD_ERROR = 3  # archive generation or stripping failed
    HOOK_ERROR = 4  # a packaging plugin failed
    IO_ERROR = 5  # scratch directory, extraction or archive write

    def __str__(self) -> str:
        return self.name.replace("_", " ").lower()
