"""Platform abstraction layer."""

from .files import create_scratch_dir, remove_tree
from .process import ProcessError, run

__all__ = [
    # files
    "create_scratch_dir",
    "remove_tree",
    # process
    "ProcessError",
    "run",
]
