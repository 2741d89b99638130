"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relpack.core.errors import ErrorCode
from relpack.output.console import Style
from relpack.release.errors import (
    ArchiveError,
    ArchiveWriteFailed,
    ExtractFailed,
    HookFailed,
    RuntimeNotFound,
    ScratchCleanupFailed,
    ScratchDirFailed,
    StripFailed,
    TarGenerationError,
    TarGenerationWarn,
)

if TYPE_CHECKING:
    from relpack.output.console import ConsoleProtocol

__all__ = ["print_archive_error", "archive_error_exit_code"]


def print_archive_error(error: ArchiveError, console: ConsoleProtocol) -> None:
    """Print an archive failure with its stage and cause."""
    match error.cause:
        case HookFailed(hook=hook, plugin=plugin, reason=reason):
            console.error(f"{hook} hook of {plugin} failed")
            console.print(reason, Style.DIM)
        case TarGenerationWarn(module=module, warnings=warnings):
            console.error(f"tar generation reported warnings ({module}); refusing partial archive")
            for w in warnings:
                console.print(f"  {w}", Style.DIM)
        case TarGenerationError() as e if e.is_unknown:
            console.error("tar generation failed (unknown error)")
        case TarGenerationError(module=module, errors=errors):
            console.error(f"tar generation failed ({module})")
            for line in errors:
                console.print(f"  {line}", Style.DIM)
        case RuntimeNotFound(detail=detail):
            console.error("could not locate the Erlang runtime")
            console.print(detail, Style.DIM)
            console.print("hint: put erl on PATH or set [runtime] in relpack.toml", Style.DIM)
        case ScratchCleanupFailed(archive=archive) as e:
            console.error(str(e))
            console.print(f"archive was written: {archive}", Style.DIM)
        case ScratchDirFailed() | ExtractFailed() | ArchiveWriteFailed() | StripFailed() as e:
            console.error(str(e))
    console.print(f"stage: {error.stage}", Style.DIM)


def archive_error_exit_code(error: ArchiveError) -> int:
    """Get the exit code for an archive failure."""
    match error.cause:
        case HookFailed():
            return int(ErrorCode.HOOK_ERROR)
        case RuntimeNotFound():
            return int(ErrorCode.ENV_ERROR)
        case TarGenerationWarn() | TarGenerationError() | StripFailed():
            return int(ErrorCode.BUILD_ERROR)
        case ScratchDirFailed() | ScratchCleanupFailed() | ExtractFailed() | ArchiveWriteFailed():
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.BUILD_ERROR)
