"""Rewrite the first-pass tarball into the final release layout.

The first-pass tarball is extracted to a scratch directory, optionally
stripped, and written back over the same path together with the release
metadata, start scripts, upgrade instructions, runtime and overlays.
"""

from __future__ import annotations

from pathlib import Path

from relpack.core.result import Err, Ok, Result
from relpack.output.console import ConsoleProtocol
from relpack.platform.files import create_scratch_dir, remove_tree
from relpack.release.errors import (
    ArchiveWriteFailed,
    ExtractFailed,
    ReshapeError,
    RuntimeNotFound,
    ScratchCleanupFailed,
    ScratchDirFailed,
)
from relpack.release.model import (
    ArchiveEntry,
    BundleDefaultErts,
    BundleErtsFrom,
    OmitErts,
    Release,
)
from relpack.services.archive.codec import ArchiveCodec
from relpack.services.archive.runtime import RuntimeInfo, erts_version_of, find_erts_dir
from relpack.services.archive.strip import strip_release

__all__ = ["final_entries", "release_file_entries", "update_tar"]


def release_file_entries(release: Release) -> list[ArchiveEntry]:
    """Fixed release metadata files, sourced from the assembled output."""
    name = release.name
    vsn = release.version
    rel_dir = release.releases_dir
    entries = [
        ArchiveEntry("releases/start_erl.data", rel_dir / "start_erl.data"),
        ArchiveEntry("releases/RELEASES", rel_dir / "RELEASES"),
    ]
    for filename in (
        "vm.args",
        "sys.config",
        f"{name}.sh",
        f"{name}.boot",
        f"{name}.script",
        f"{name}.rel",
        "start_clean.boot",
    ):
        entries.append(ArchiveEntry(f"releases/{vsn}/{filename}", rel_dir / vsn / filename))
    return entries


def _project_libs(scratch_lib: Path, system_lib: Path) -> list[ArchiveEntry]:
    """Applications under `scratch_lib` that are not runtime system libraries.

    Directories are compared by name (`<app>-<vsn>`) as a set, so `kernel-9.0`
    only excludes exactly that directory and never `kernel_ext-1.0`.
    """
    system = {p.name for p in system_lib.iterdir() if p.is_dir()} if system_lib.is_dir() else set()
    if not scratch_lib.is_dir():
        return []
    return [
        ArchiveEntry(f"lib/{p.name}", p)
        for p in sorted(scratch_lib.iterdir())
        if p.is_dir() and p.name not in system
    ]


def _erts_entry(
    release: Release, scratch: Path, runtime: RuntimeInfo | None
) -> Result[ArchiveEntry, RuntimeNotFound]:
    match release.profile.include_erts:
        case BundleErtsFrom(path=path):
            erts_dir = find_erts_dir(path.expanduser().resolve())
            vsn = erts_version_of(erts_dir) if erts_dir else None
        case _:
            vsn = runtime.erts_version if runtime else None
    if vsn is None:
        return Err(RuntimeNotFound("cannot determine the erts version to bundle"))

    name = f"erts-{vsn}"
    source = release.output_dir / name
    if not source.is_dir():
        source = scratch / name
    return Ok(ArchiveEntry(name, source))


def final_entries(
    release: Release, scratch: Path, runtime: RuntimeInfo | None, *, console: ConsoleProtocol
) -> Result[list[ArchiveEntry], RuntimeNotFound]:
    """Compose the final archive members, in write order."""
    out = release.output_dir
    entries = [ArchiveEntry("releases", scratch / "releases")]
    entries += release_file_entries(release)
    entries.append(ArchiveEntry("bin", out / "bin"))

    consolidated = out / "lib" / release.app_dir_name / "consolidated"
    if consolidated.exists():
        entries.append(
            ArchiveEntry(f"lib/{release.app_dir_name}/consolidated", consolidated)
        )

    if release.is_upgrade:
        entries.append(
            ArchiveEntry(f"releases/{release.version}/relup", release.version_dir / "relup")
        )

    profile = release.profile
    match profile.include_erts:
        case OmitErts() if not profile.include_system_libs:
            if runtime is None:
                return Err(RuntimeNotFound("needed to exclude system libraries"))
            console.debug("Stripping system libs from release tarball")
            entries += _project_libs(scratch / "lib", runtime.lib_dir)
        case OmitErts():
            entries.append(ArchiveEntry("lib", scratch / "lib"))
        case BundleDefaultErts() | BundleErtsFrom():
            erts = _erts_entry(release, scratch, runtime)
            if isinstance(erts, Err):
                return erts
            entries.append(ArchiveEntry("lib", scratch / "lib"))
            entries.append(erts.value)

    entries += release.resolved_overlays
    return Ok(entries)


def _reshape(
    release: Release,
    scratch: Path,
    *,
    runtime: RuntimeInfo | None,
    codec: ArchiveCodec,
    console: ConsoleProtocol,
) -> Result[Path, ReshapeError]:
    tarfile = release.tarball_path

    extracted = codec.extract(tarfile, scratch, compressed=True)
    if isinstance(extracted, Err):
        return Err(ExtractFailed(tarfile, extracted.error.message))

    stripped = strip_release(release, scratch, console=console)
    if isinstance(stripped, Err):
        return stripped

    entries = final_entries(release, scratch, runtime, console=console)
    if isinstance(entries, Err):
        return entries

    written = codec.create(tarfile, entries.value, compressed=True, dereference=True)
    if isinstance(written, Err):
        return Err(ArchiveWriteFailed(tarfile, written.error.message))

    console.debug("Tarball updated!")
    return Ok(tarfile)


def update_tar(
    release: Release,
    *,
    runtime: RuntimeInfo | None,
    codec: ArchiveCodec,
    console: ConsoleProtocol,
) -> Result[Path, ReshapeError]:
    """Rewrite `release.tarball_path` into its final layout.

    The scratch directory is removed on every exit path. If removal fails
    after the archive was written, the error carries the archive path.
    """
    console.debug("Updating tarball")
    created = create_scratch_dir()
    if isinstance(created, Err):
        return Err(ScratchDirFailed(created.error))
    scratch = created.value

    try:
        result = _reshape(release, scratch, runtime=runtime, codec=codec, console=console)
    finally:
        removed = remove_tree(scratch)

    if isinstance(removed, Err):
        if isinstance(result, Ok):
            return Err(ScratchCleanupFailed(scratch, removed.error, archive=result.value))
        console.warning(f"failed to remove {scratch} ({removed.error})")
    return result
