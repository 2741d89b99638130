"""Release and profile model.

A `Release` describes one packaging job. It is built by the config loader
(or by a caller embedding relpack) and never mutated afterwards: plugins
that want a different release return a `dataclasses.replace` copy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "ArchiveEntry",
    "BundleDefaultErts",
    "BundleErtsFrom",
    "ErtsPolicy",
    "OmitErts",
    "PluginSpec",
    "Profile",
    "Release",
    "RuntimeInfo",
    "erts_policy_from_value",
]


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """One archive member: `archive_path` inside the tarball, `source` on disk.

    A directory source is added recursively.
    """

    archive_path: str
    source: Path


@dataclass(frozen=True, slots=True)
class OmitErts:
    """Do not bundle the runtime; the target host provides one."""


@dataclass(frozen=True, slots=True)
class BundleDefaultErts:
    """Bundle the runtime of the active Erlang installation."""


@dataclass(frozen=True, slots=True)
class BundleErtsFrom:
    """Bundle the runtime found under an explicit installation root."""

    path: Path


ErtsPolicy = OmitErts | BundleDefaultErts | BundleErtsFrom


def erts_policy_from_value(value: bool | str | Path) -> ErtsPolicy:
    """Convert the `include_erts = true | false | "<path>"` config value."""
    if value is True:
        return BundleDefaultErts()
    if value is False:
        return OmitErts()
    return BundleErtsFrom(Path(value).expanduser())


@dataclass(frozen=True, slots=True)
class RuntimeInfo:
    """An Erlang installation: its root directory and ERTS version."""

    root: Path
    erts_version: str

    @property
    def lib_dir(self) -> Path:
        return self.root / "lib"

    @property
    def erts_dir(self) -> Path:
        return self.root / f"erts-{self.erts_version}"


@dataclass(frozen=True, slots=True)
class PluginSpec:
    """Reference to a packaging plugin as `module:attribute`."""

    ref: str
    options: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Profile:
    include_src: bool = False
    include_erts: ErtsPolicy = field(default_factory=BundleDefaultErts)
    include_system_libs: bool = True
    strip_debug_info: bool = False
    dev_mode: bool = False
    plugins: tuple[PluginSpec, ...] = ()

    @property
    def bundles_erts(self) -> bool:
        return not isinstance(self.include_erts, OmitErts)


@dataclass(frozen=True, slots=True)
class Release:
    name: str
    version: str
    output_dir: Path
    profile: Profile = field(default_factory=Profile)
    is_upgrade: bool = False
    resolved_overlays: tuple[ArchiveEntry, ...] = ()

    @property
    def app_dir_name(self) -> str:
        """Directory name of the release's own application under lib/."""
        return f"{self.name}-{self.version}"

    @property
    def releases_dir(self) -> Path:
        return self.output_dir / "releases"

    @property
    def version_dir(self) -> Path:
        return self.releases_dir / self.version

    @property
    def tarball_path(self) -> Path:
        return self.version_dir / f"{self.name}.tar.gz"
