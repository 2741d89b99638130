"""Strip command - remove debug chunks from the modules of a release tree."""

from __future__ import annotations

from pathlib import Path

import typer

from relpack.core.errors import ErrorCode
from relpack.core.result import Err
from relpack.output.console import RichConsole
from relpack.services.archive.beam import strip_beam_tree


def strip(
    path: Path = typer.Argument(..., help="Release root containing lib/*/ebin"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List stripped files"),
) -> None:
    """Strip debug info from every lib/*/ebin/*.beam under PATH, in place."""
    console = RichConsole(verbose=verbose)

    result = strip_beam_tree(path)
    if isinstance(result, Err):
        console.error(f"failed to strip release: {result.error}")
        raise typer.Exit(code=int(ErrorCode.BUILD_ERROR))

    for beam in result.value:
        console.debug(str(beam))
    console.success(f"stripped {len(result.value)} modules under {path}")
