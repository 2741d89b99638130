"""Locate the active Erlang runtime.

The archiver needs the runtime root (to bundle ERTS), the ERTS version (to
name the `erts-<vsn>` directory) and the library root (to tell system
applications apart from project applications).
"""

from __future__ import annotations

import re
from pathlib import Path

from relpack.core.result import Err, Ok, Result
from relpack.platform.process import run
from relpack.release.errors import RuntimeNotFound
from relpack.release.model import RuntimeInfo

__all__ = ["RuntimeInfo", "detect_runtime", "find_erts_dir", "erts_version_of"]

_RUNTIME_QUERY = (
    'io:format("~s~n~s~n", [code:root_dir(), erlang:system_info(version)]), halt().'
)

_ERTS_DIR = re.compile(r"^erts-(?P<vsn>\d[\w.\-]*)$")


def detect_runtime(
    *, erl: str = "erl", timeout: float = 30.0
) -> Result[RuntimeInfo, RuntimeNotFound]:
    """Ask the `erl` on PATH for its root directory and ERTS version."""
    result = run([erl, "-noshell", "-eval", _RUNTIME_QUERY], cwd=Path.cwd(), timeout=timeout)
    if isinstance(result, Err):
        detail = result.error.stderr.strip() or str(result.error)
        return Err(RuntimeNotFound(detail))

    lines = [line.strip() for line in result.value.splitlines() if line.strip()]
    if len(lines) < 2:
        return Err(RuntimeNotFound(f"unexpected output from {erl}: {result.value!r}"))

    return Ok(RuntimeInfo(root=Path(lines[0]).resolve(), erts_version=lines[1]))


def erts_version_of(path: Path) -> str | None:
    """Return the version encoded in an `erts-<vsn>` directory name."""
    m = _ERTS_DIR.match(path.name)
    return m.group("vsn") if m else None


def find_erts_dir(root: Path) -> Path | None:
    """Find the ERTS directory for an explicit runtime path.

    `root` may be the `erts-<vsn>` directory itself or an installation root
    containing exactly one of them; with several, the last in sort order wins.
    """
    if erts_version_of(root) is not None and root.is_dir():
        return root
    if not root.is_dir():
        return None
    candidates = sorted(
        p for p in root.iterdir() if p.is_dir() and erts_version_of(p) is not None
    )
    return candidates[-1] if candidates else None
