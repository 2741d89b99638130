"""Release packaging model and error types."""

from __future__ import annotations

from .errors import ArchiveError, PackagingError
from .model import (
    ArchiveEntry,
    BundleDefaultErts,
    BundleErtsFrom,
    ErtsPolicy,
    OmitErts,
    PluginSpec,
    Profile,
    Release,
    RuntimeInfo,
    erts_policy_from_value,
)

__all__ = [
    "ArchiveEntry",
    "ArchiveError",
    "BundleDefaultErts",
    "BundleErtsFrom",
    "ErtsPolicy",
    "OmitErts",
    "PackagingError",
    "PluginSpec",
    "Profile",
    "Release",
    "RuntimeInfo",
    "erts_policy_from_value",
]
