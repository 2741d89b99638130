"""The one place relpack spawns external programs.

Only Erlang runtime detection needs this today. Output is captured as text
and failures come back as `ProcessError` values:

    match run(["erl", "-noshell", "-eval", expr], cwd=Path.cwd(), timeout=30.0):
        case Ok(stdout):
            ...
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from relpack.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]

# returncode used when the program never produced an exit status
NOT_RUN = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not run or exited non-zero.

    `stderr` holds the OS error text when the program could not be started
    and a timeout notice when it was killed.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown = f"{shown} ..."
        return f"{shown} failed (exit {self.returncode})"


def _not_run(cmd: Sequence[str], reason: str) -> Err[ProcessError]:
    return Err(ProcessError(tuple(cmd), NOT_RUN, "", reason))


def run(
    cmd: Sequence[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run `cmd` in `cwd` and return its stdout when it exits with status 0."""
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return _not_run(cmd, f"Command timed out after {timeout}s")
    except OSError as e:
        return _not_run(cmd, str(e))

    if proc.returncode == 0:
        return Ok(proc.stdout)
    return Err(ProcessError(tuple(cmd), proc.returncode, proc.stdout, proc.stderr))
