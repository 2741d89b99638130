"""Typed loading of packaging config files (relpack.toml).

The config describes one release to package: the `[release]` identity and
output directory, the `[profile]` policy, resolved `[[overlays]]` and an
optional pinned `[runtime]`. Relative paths resolve against the directory of
the config file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relpack.release.model import (
    ArchiveEntry,
    PluginSpec,
    Profile,
    Release,
    RuntimeInfo,
    erts_policy_from_value,
)

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_list,
    get_str,
    get_table,
    is_str_dict,
)

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "ConfigError",
    "PackageConfig",
    "load_config",
    "parse_config",
]

DEFAULT_CONFIG_NAME = "relpack.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PackageConfig:
    release: Release
    runtime: RuntimeInfo | None = None


# key -> (expected type, wording)
_TABLE = (dict, "a table")
_ARRAY = (list, "an array")
_BOOL = (bool, "a boolean")
_STR = (str, "a string")

_TOP_KEYS = {"release": _TABLE, "profile": _TABLE, "overlays": _ARRAY, "runtime": _TABLE}
_RELEASE_KEYS = {"name": _STR, "version": _STR, "output_dir": _STR, "upgrade": _BOOL}
_PROFILE_KEYS = {
    "include_src": _BOOL,
    "include_system_libs": _BOOL,
    "strip_debug_info": _BOOL,
    "dev_mode": _BOOL,
    "plugins": _ARRAY,
}
_RUNTIME_KEYS = {"root": _STR, "erts_version": _STR}


def _check_types(
    table: StrDict, prefix: str, expected: dict[str, tuple[type, str]]
) -> Result[None, str]:
    """First key present in `table` with the wrong type, as an error message."""
    for key, (kind, wording) in expected.items():
        if key in table and not isinstance(table[key], kind):
            return Err(f"{prefix}{key} must be {wording}")
    return Ok(None)


def _resolve(base: Path, value: str) -> Path:
    p = Path(value).expanduser()
    return p if p.is_absolute() else (base / p)


def _parse_profile(table: StrDict, base: Path) -> Result[Profile, str]:
    checked = _check_types(table, "profile.", _PROFILE_KEYS)
    if isinstance(checked, Err):
        return checked

    raw_erts = table.get("include_erts", True)
    if isinstance(raw_erts, bool):
        erts = erts_policy_from_value(raw_erts)
    elif isinstance(raw_erts, str) and raw_erts.strip():
        erts = erts_policy_from_value(_resolve(base, raw_erts.strip()))
    else:
        return Err("profile.include_erts must be a boolean or a path")

    plugins: list[PluginSpec] = []
    for index, item in enumerate(get_list(table, "plugins") or []):
        if isinstance(item, str) and item.strip():
            plugins.append(PluginSpec(ref=item.strip()))
            continue
        entry = as_str_dict(item)
        ref = get_str(entry, "ref") if entry is not None else None
        if entry is None or ref is None:
            return Err("profile.plugins entries must be 'module:attr' or {ref = ...}")
        options = entry.get("options", {})
        if not is_str_dict(options):
            return Err(f"profile.plugins[{index}].options must be a table")
        plugins.append(PluginSpec(ref=ref, options=options))

    return Ok(
        Profile(
            include_src=get_bool(table, "include_src", False),
            include_erts=erts,
            include_system_libs=get_bool(table, "include_system_libs", True),
            strip_debug_info=get_bool(table, "strip_debug_info", False),
            dev_mode=get_bool(table, "dev_mode", False),
            plugins=tuple(plugins),
        )
    )


def _parse_overlays(items: list[object], base: Path) -> Result[tuple[ArchiveEntry, ...], str]:
    overlays: list[ArchiveEntry] = []
    for index, item in enumerate(items):
        entry = as_str_dict(item)
        if entry is None:
            return Err(f"overlays[{index}] must be a table")
        arc = get_str(entry, "path")
        source = get_str(entry, "source")
        if arc is None or source is None:
            return Err(f"overlays[{index}] needs both 'path' and 'source'")
        overlays.append(ArchiveEntry(arc.lstrip("/"), _resolve(base, source)))
    return Ok(tuple(overlays))


def parse_config(data: StrDict, *, base_dir: Path) -> Result[PackageConfig, str]:
    """Build a PackageConfig from parsed TOML data.

    Optional keys that are present with the wrong type are errors, not
    silently replaced by their defaults.
    """
    if "release" not in data:
        return Err("missing [release] table")
    checked = _check_types(data, "", _TOP_KEYS)
    if isinstance(checked, Err):
        return checked
    release_table = get_table(data, "release")
    if release_table is None:
        return Err("release must be a table")
    checked = _check_types(release_table, "release.", _RELEASE_KEYS)
    if isinstance(checked, Err):
        return checked

    name = get_str(release_table, "name")
    version = get_str(release_table, "version")
    output_dir = get_str(release_table, "output_dir")
    if name is None:
        return Err("release.name is required")
    if version is None:
        return Err("release.version is required")
    if output_dir is None:
        return Err("release.output_dir is required")

    profile = _parse_profile(get_table(data, "profile") or {}, base_dir)
    if isinstance(profile, Err):
        return profile

    overlays = _parse_overlays(get_list(data, "overlays") or [], base_dir)
    if isinstance(overlays, Err):
        return overlays

    runtime: RuntimeInfo | None = None
    runtime_table = get_table(data, "runtime")
    if runtime_table is not None:
        checked = _check_types(runtime_table, "runtime.", _RUNTIME_KEYS)
        if isinstance(checked, Err):
            return checked
        root = get_str(runtime_table, "root")
        erts_version = get_str(runtime_table, "erts_version")
        if root is None or erts_version is None:
            return Err("[runtime] needs both 'root' and 'erts_version'")
        runtime = RuntimeInfo(root=_resolve(base_dir, root), erts_version=erts_version)

    release = Release(
        name=name,
        version=version,
        output_dir=_resolve(base_dir, output_dir),
        profile=profile.value,
        is_upgrade=get_bool(release_table, "upgrade", False),
        resolved_overlays=overlays.value,
    )
    return Ok(PackageConfig(release=release, runtime=runtime))


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[PackageConfig, ConfigError]:
    """Load and validate a packaging config file.

    Args:
        path: Path to relpack.toml

    Returns:
        Ok(PackageConfig) on success, Err(ConfigError) on failure
    """
    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        return parsed

    result = parse_config(parsed.value, base_dir=path.parent.resolve())
    if isinstance(result, Err):
        return Err(ConfigError(result.error, path=path))
    return Ok(result.value)
