"""Package an assembled release into a tarball.

    before_package hooks -> first-pass tarball -> reshape -> after_package hooks

Each stage returns a Result; the first Err stops the pipeline and is
returned tagged with its stage.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from relpack.core.result import Err, Ok, Result
from relpack.output.console import ConsoleProtocol, RichConsole
from relpack.release.errors import ArchiveError, HookFailed, RuntimeNotFound, Stage
from relpack.release.model import BundleDefaultErts, OmitErts, Profile, Release
from relpack.services.archive.codec import ArchiveCodec, TarCodec
from relpack.services.archive.make_tar import ReleaseTarBuilder, TarBuilder, make_tar
from relpack.services.archive.plugins import (
    load_plugins,
    run_after_package,
    run_before_package,
)
from relpack.services.archive.runtime import RuntimeInfo, detect_runtime
from relpack.services.archive.update_tar import update_tar

__all__ = ["ArchiveEnv", "archive"]


def _default_console() -> ConsoleProtocol:
    return RichConsole()


@dataclass(frozen=True, slots=True)
class ArchiveEnv:
    """Collaborators of one archive run.

    `console` defaults to the terminal. `runtime` pins the Erlang runtime;
    when None, `detect` is called right before the first stage that needs it,
    and never if the profile needs no runtime at all.
    """

    console: ConsoleProtocol = field(default_factory=_default_console)
    codec: ArchiveCodec = field(default_factory=TarCodec)
    builder: TarBuilder | None = None
    runtime: RuntimeInfo | None = None
    detect: Callable[[], Result[RuntimeInfo, RuntimeNotFound]] = detect_runtime


def _runtime_stage(profile: Profile) -> Stage | None:
    """The first stage that needs the active runtime, if any."""
    if isinstance(profile.include_erts, BundleDefaultErts):
        return "make_tar"
    if isinstance(profile.include_erts, OmitErts) and not profile.include_system_libs:
        return "update_tar"
    return None


def _resolve_runtime(
    env: ArchiveEnv, stage: Stage, console: ConsoleProtocol
) -> Result[RuntimeInfo, ArchiveError]:
    if env.runtime is not None:
        return Ok(env.runtime)
    detected = env.detect()
    if isinstance(detected, Err):
        return Err(ArchiveError(stage, detected.error))
    runtime = detected.value
    console.debug(f"Using Erlang runtime at {runtime.root} (erts {runtime.erts_version})")
    return Ok(runtime)


def archive(release: Release, env: ArchiveEnv | None = None) -> Result[Path, ArchiveError]:
    """Package `release` and return the absolute tarball path."""
    env = env or ArchiveEnv()
    console = env.console
    console.debug(f"Archiving {release.name}-{release.version}")

    loaded = load_plugins(release.profile.plugins)
    if isinstance(loaded, Err):
        err = loaded.error
        cause = HookFailed("before_package", err.ref, err.message)
        return Err(ArchiveError("before_package", cause))
    plugins = loaded.value

    before = run_before_package(release, plugins, console=console)
    if isinstance(before, Err):
        return Err(ArchiveError("before_package", before.error))
    release = before.value

    runtime = env.runtime
    stage = _runtime_stage(release.profile)
    if stage == "make_tar":
        resolved = _resolve_runtime(env, stage, console)
        if isinstance(resolved, Err):
            return resolved
        runtime = resolved.value

    builder = env.builder or ReleaseTarBuilder(env.codec)
    built = make_tar(release, runtime=runtime, builder=builder, console=console)
    if isinstance(built, Err):
        return Err(ArchiveError("make_tar", built.error))

    if stage == "update_tar":
        resolved = _resolve_runtime(env, stage, console)
        if isinstance(resolved, Err):
            return resolved
        runtime = resolved.value

    updated = update_tar(release, runtime=runtime, codec=env.codec, console=console)
    if isinstance(updated, Err):
        return Err(ArchiveError("update_tar", updated.error))
    tarfile = updated.value

    after = run_after_package(release, plugins, console=console)
    if isinstance(after, Err):
        return Err(ArchiveError("after_package", after.error))

    return Ok(tarfile.resolve())
