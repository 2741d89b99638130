"""First-pass release tarball.

Collects the compiled applications of the assembled release (and, by
profile, their sources and the runtime) into
`releases/<version>/<name>.tar.gz`. The result is only an intermediate: the
reshape stage extracts it and writes the final layout over the same path.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relpack.core.result import Err, Ok, Result
from relpack.output.console import ConsoleProtocol
from relpack.release.errors import TarGenerationError, TarGenerationWarn
from relpack.release.model import (
    ArchiveEntry,
    BundleDefaultErts,
    BundleErtsFrom,
    OmitErts,
    Release,
)
from relpack.services.archive.codec import ArchiveCodec, TarCodec
from relpack.services.archive.runtime import RuntimeInfo, find_erts_dir

__all__ = [
    "MakeTarOutcome",
    "ReleaseTarBuilder",
    "TarBuilder",
    "TarBuilt",
    "TarBuiltWithWarnings",
    "TarFailed",
    "make_tar",
]

BUILDER_MODULE = "systools_make"
CODEC_MODULE = "erl_tar"

APP_DIRS = ("ebin", "priv", "include")
SRC_DIRS = ("src", "c_src")


@dataclass(frozen=True, slots=True)
class TarBuilt:
    pass


@dataclass(frozen=True, slots=True)
class TarBuiltWithWarnings:
    module: str
    warnings: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TarFailed:
    module: str | None
    errors: tuple[str, ...] = ()


MakeTarOutcome = TarBuilt | TarBuiltWithWarnings | TarFailed


class TarBuilder(Protocol):
    def build(self, release: Release, runtime: RuntimeInfo | None) -> MakeTarOutcome:
        """Write the first-pass tarball for `release`."""
        ...


def _app_dirs(output_dir: Path) -> list[Path]:
    """Every application directory produced by the build (`lib/*/ebin`)."""
    return sorted(p.parent for p in output_dir.glob("lib/*/ebin") if p.is_dir())


def _app_name(app_dir: Path) -> str:
    # lib/<app>-<vsn>: application names never contain '-'
    return app_dir.name.split("-", 1)[0]


class ReleaseTarBuilder:
    """Default `TarBuilder`.

    Warns about applications without an `.app` resource file and fails when
    the `.rel` file or the requested runtime is missing.
    """

    def __init__(self, codec: ArchiveCodec | None = None) -> None:
        self._codec = codec or TarCodec()

    def build(self, release: Release, runtime: RuntimeInfo | None) -> MakeTarOutcome:
        rel_file = release.version_dir / f"{release.name}.rel"
        if not rel_file.is_file():
            return TarFailed(BUILDER_MODULE, (f"missing release file {rel_file}",))

        profile = release.profile
        dirs = APP_DIRS + (SRC_DIRS if profile.include_src else ())

        entries: list[ArchiveEntry] = []
        warnings: list[str] = []
        for app_dir in _app_dirs(release.output_dir):
            app_file = app_dir / "ebin" / f"{_app_name(app_dir)}.app"
            if not app_file.is_file():
                warnings.append(f"missing application resource file {app_file}")
            for sub in dirs:
                src = app_dir / sub
                if src.is_dir():
                    entries.append(ArchiveEntry(f"lib/{app_dir.name}/{sub}", src))

        entries.append(ArchiveEntry(f"releases/{release.name}.rel", rel_file))
        boot = release.version_dir / f"{release.name}.boot"
        if boot.is_file():
            entries.append(ArchiveEntry(f"releases/{release.version}/start.boot", boot))

        match profile.include_erts:
            case BundleDefaultErts():
                if runtime is None or not runtime.erts_dir.is_dir():
                    where = runtime.erts_dir if runtime else "the active runtime"
                    return TarFailed(BUILDER_MODULE, (f"erts not found in {where}",))
                entries.append(ArchiveEntry(runtime.erts_dir.name, runtime.erts_dir))
            case BundleErtsFrom(path=path):
                erts_dir = find_erts_dir(path.expanduser().resolve())
                if erts_dir is None:
                    return TarFailed(BUILDER_MODULE, (f"erts not found in {path}",))
                entries.append(ArchiveEntry(erts_dir.name, erts_dir))
            case OmitErts():
                pass

        written = self._codec.create(
            release.tarball_path, entries, compressed=True, dereference=True
        )
        if isinstance(written, Err):
            if not written.error.message:
                return TarFailed(None)
            return TarFailed(CODEC_MODULE, (str(written.error),))

        if warnings:
            return TarBuiltWithWarnings(BUILDER_MODULE, tuple(warnings))
        return TarBuilt()


def make_tar(
    release: Release,
    *,
    runtime: RuntimeInfo | None,
    builder: TarBuilder,
    console: ConsoleProtocol,
) -> Result[None, TarGenerationWarn | TarGenerationError]:
    """Build the first-pass tarball. Builder warnings count as failures."""
    console.debug(f"Writing tarball to {release.tarball_path}")
    match builder.build(release, runtime):
        case TarBuilt():
            return Ok(None)
        case TarBuiltWithWarnings(module=module, warnings=warnings):
            return Err(TarGenerationWarn(module, warnings))
        case TarFailed(module=module, errors=errors):
            return Err(TarGenerationError(module, errors))
