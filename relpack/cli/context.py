from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relpack.core.config import PackageConfig, load_config
from relpack.core.errors import ErrorCode
from relpack.core.result import Err
from relpack.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config_path: Path
    config: PackageConfig
    console: ConsoleProtocol


def build_context(config_path: Path, *, verbose: bool = False) -> CLIContext:
    console = RichConsole(verbose=verbose)

    result = load_config(config_path)
    if isinstance(result, Err):
        console.error(result.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(config_path=config_path, config=result.value, console=console)
