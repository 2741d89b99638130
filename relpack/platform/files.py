"""Filesystem helpers for scratch directories."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from relpack.core.result import Err, Ok, Result

__all__ = ["create_scratch_dir", "remove_tree"]


def create_scratch_dir(*, prefix: str = "relpack-") -> Result[Path, str]:
    """Create a fresh, uniquely named directory under the system temp dir.

    Returns Err with the OS error text when the directory cannot be created.
    """
    try:
        return Ok(Path(tempfile.mkdtemp(prefix=prefix)))
    except OSError as e:
        return Err(str(e))


def remove_tree(path: Path) -> Result[None, str]:
    """Recursively delete `path`. A missing path counts as removed."""
    if not path.exists():
        return Ok(None)
    try:
        shutil.rmtree(path)
    except OSError as e:
        return Err(str(e))
    return Ok(None)
