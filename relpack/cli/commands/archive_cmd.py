"""Archive command - package an assembled release into a tarball."""

from __future__ import annotations

from pathlib import Path

import typer

from relpack.cli.context import build_context
from relpack.core.config import DEFAULT_CONFIG_NAME
from relpack.core.result import Err, Ok
from relpack.output.errors import archive_error_exit_code, print_archive_error
from relpack.services.archive import ArchiveEnv, archive as archive_release


def archive(
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Packaging config file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
) -> None:
    """Package the release described by the config into a .tar.gz."""
    ctx = build_context(config, verbose=verbose)
    release = ctx.config.release

    env = ArchiveEnv(console=ctx.console, runtime=ctx.config.runtime)
    match archive_release(release, env):
        case Ok(path):
            ctx.console.success(str(path))
        case Err(error):
            print_archive_error(error, ctx.console)
            raise typer.Exit(code=archive_error_exit_code(error))
