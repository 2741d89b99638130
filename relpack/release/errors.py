"""Error types for release packaging.

Each failure is a small frozen dataclass; the unions below are what the
packaging stages put inside `Err`. `ArchiveError` is the envelope the
archiver returns, tagging the cause with the stage that produced it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

__all__ = [
    "ArchiveError",
    "ArchiveWriteFailed",
    "ExtractFailed",
    "HookFailed",
    "PackagingError",
    "ReshapeError",
    "RuntimeNotFound",
    "ScratchCleanupFailed",
    "ScratchDirFailed",
    "Stage",
    "StripFailed",
    "TarGenerationError",
    "TarGenerationWarn",
]


@dataclass(frozen=True, slots=True)
class HookFailed:
    hook: Literal["before_package", "after_package"]
    plugin: str
    reason: str

    def __str__(self) -> str:
        return f"plugin {self.plugin} failed in {self.hook}: {self.reason}"


@dataclass(frozen=True, slots=True)
class TarGenerationWarn:
    """The initial archive was written but the builder reported warnings."""

    module: str
    warnings: tuple[str, ...]

    def __str__(self) -> str:
        return f"tar_generation_warn ({self.module}): {'; '.join(self.warnings)}"


@dataclass(frozen=True, slots=True)
class TarGenerationError:
    """The initial archive could not be built. `module=None` means no detail."""

    module: str | None
    errors: tuple[str, ...] = ()

    @property
    def is_unknown(self) -> bool:
        return self.module is None

    def __str__(self) -> str:
        if self.module is None:
            return "tar_generation_error: unknown"
        return f"tar_generation_error ({self.module}): {'; '.join(self.errors)}"


@dataclass(frozen=True, slots=True)
class RuntimeNotFound:
    detail: str

    def __str__(self) -> str:
        return f"could not locate the Erlang runtime: {self.detail}"


@dataclass(frozen=True, slots=True)
class ScratchDirFailed:
    detail: str

    def __str__(self) -> str:
        return f"failed to create temporary directory {self.detail}"


@dataclass(frozen=True, slots=True)
class ScratchCleanupFailed:
    """The final archive was written but the scratch directory survived."""

    path: Path
    detail: str
    archive: Path

    def __str__(self) -> str:
        return f"failed to remove {self.path} ({self.detail})"


@dataclass(frozen=True, slots=True)
class ExtractFailed:
    archive: Path
    detail: str

    def __str__(self) -> str:
        return f"failed to extract {self.archive}: {self.detail}"


@dataclass(frozen=True, slots=True)
class ArchiveWriteFailed:
    archive: Path
    detail: str

    def __str__(self) -> str:
        return f"failed to write {self.archive}: {self.detail}"


@dataclass(frozen=True, slots=True)
class StripFailed:
    detail: str

    def __str__(self) -> str:
        return f"failed to strip release: {self.detail}"


ReshapeError = (
    RuntimeNotFound
    | ScratchDirFailed
    | ScratchCleanupFailed
    | ExtractFailed
    | ArchiveWriteFailed
    | StripFailed
)

PackagingError = HookFailed | TarGenerationWarn | TarGenerationError | ReshapeError

Stage = Literal["before_package", "make_tar", "update_tar", "after_package"]


@dataclass(frozen=True, slots=True)
class ArchiveError:
    stage: Stage
    cause: PackagingError

    def pretty(self) -> str:
        return f"{self.stage}: {self.cause}"
