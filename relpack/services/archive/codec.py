"""Archive codec: write and read release tarballs.

The packaging stages only talk to `ArchiveCodec`, so the tar implementation
can be swapped (tests use it to simulate write failures).
"""

from __future__ import annotations

import tarfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relpack.core.result import Err, Ok, Result
from relpack.release.model import ArchiveEntry

__all__ = ["ArchiveCodec", "CodecError", "TarCodec"]


@dataclass(frozen=True, slots=True)
class CodecError:
    archive: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.archive}"


class ArchiveCodec(Protocol):
    def create(
        self,
        archive: Path,
        entries: Sequence[ArchiveEntry],
        *,
        compressed: bool = True,
        dereference: bool = False,
    ) -> Result[None, CodecError]:
        """Write `entries` to `archive` in order, replacing any existing file."""
        ...

    def extract(
        self, archive: Path, dest: Path, *, compressed: bool = True
    ) -> Result[None, CodecError]:
        """Extract `archive` into the existing directory `dest`."""
        ...


class TarCodec:
    """`ArchiveCodec` backed by the standard library `tarfile` module.

    Entries are written in the given order. Duplicate archive paths are
    written twice; on extraction the later member wins.
    """

    def create(
        self,
        archive: Path,
        entries: Sequence[ArchiveEntry],
        *,
        compressed: bool = True,
        dereference: bool = False,
    ) -> Result[None, CodecError]:
        missing = [e for e in entries if not e.source.exists()]
        if missing:
            first = missing[0]
            return Err(
                CodecError(archive=archive, message=f"{first.source}: no such file or directory")
            )

        # The previous archive stays in place until the new one is complete.
        tmp = archive.with_name(f".{archive.name}.tmp")
        mode = "w:gz" if compressed else "w"
        try:
            archive.parent.mkdir(parents=True, exist_ok=True)
            with tarfile.open(tmp, mode, dereference=dereference) as tar:
                for entry in entries:
                    tar.add(entry.source, arcname=entry.archive_path, recursive=True)
            tmp.replace(archive)
        except (tarfile.TarError, OSError) as e:
            tmp.unlink(missing_ok=True)
            return Err(CodecError(archive=archive, message=f"Tar creation failed: {e}"))

        return Ok(None)

    def extract(
        self, archive: Path, dest: Path, *, compressed: bool = True
    ) -> Result[None, CodecError]:
        if not archive.exists():
            return Err(CodecError(archive=archive, message="Archive not found"))

        mode = "r:gz" if compressed else "r"
        try:
            with tarfile.open(archive, mode) as tar:
                tar.extractall(dest, filter="data")
        except (tarfile.TarError, OSError) as e:
            return Err(CodecError(archive=archive, message=f"Tar extraction failed: {e}"))

        return Ok(None)
