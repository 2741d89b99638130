"""Packaging plugins: the before/after package hooks.

A plugin is any object with optional methods

    before_package(release, options) -> Release | None | Err[str]
    after_package(release, options) -> object | Err[str]

referenced from the config as `module:attribute`. Classes are instantiated
without arguments. `before_package` may return a modified release, which the
next plugin and the rest of the pipeline receive; `None` keeps the release
unchanged. Returning `Err` or raising aborts packaging.
"""

from __future__ import annotations

import importlib
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from relpack.core.result import Err, Ok, Result
from relpack.output.console import ConsoleProtocol
from relpack.release.errors import HookFailed
from relpack.release.model import PluginSpec, Release

__all__ = [
    "LoadedPlugin",
    "PluginLoadError",
    "load_plugins",
    "run_after_package",
    "run_before_package",
]

Hook = Literal["before_package", "after_package"]


@dataclass(frozen=True, slots=True)
class LoadedPlugin:
    ref: str
    plugin: object
    options: dict[str, object]


@dataclass(frozen=True, slots=True)
class PluginLoadError:
    ref: str
    message: str

    def __str__(self) -> str:
        return f"cannot load plugin {self.ref}: {self.message}"


def _load_one(spec: PluginSpec) -> Result[LoadedPlugin, PluginLoadError]:
    module_name, sep, attr = spec.ref.partition(":")
    if not sep or not module_name or not attr:
        return Err(PluginLoadError(spec.ref, "expected 'module:attribute'"))
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        return Err(PluginLoadError(spec.ref, str(e)))

    target: object = module
    for part in attr.split("."):
        if not hasattr(target, part):
            return Err(PluginLoadError(spec.ref, f"{module_name} has no attribute {attr}"))
        target = getattr(target, part)

    plugin = target() if isinstance(target, type) else target
    return Ok(LoadedPlugin(ref=spec.ref, plugin=plugin, options=dict(spec.options)))


def load_plugins(specs: Sequence[PluginSpec]) -> Result[list[LoadedPlugin], PluginLoadError]:
    loaded: list[LoadedPlugin] = []
    for spec in specs:
        result = _load_one(spec)
        if isinstance(result, Err):
            return result
        loaded.append(result.value)
    return Ok(loaded)


def _call(
    hook: Hook, loaded: LoadedPlugin, release: Release
) -> Result[object, HookFailed]:
    callback = getattr(loaded.plugin, hook, None)
    if callback is None:
        return Ok(None)
    try:
        value: object = callback(release, loaded.options)
    except Exception as e:  # noqa: BLE001
        return Err(HookFailed(hook, loaded.ref, f"{type(e).__name__}: {e}"))
    if isinstance(value, Err):
        return Err(HookFailed(hook, loaded.ref, str(value.error)))
    return Ok(value)


def run_before_package(
    release: Release,
    plugins: Sequence[LoadedPlugin],
    *,
    console: ConsoleProtocol,
) -> Result[Release, HookFailed]:
    """Thread the release through every plugin's `before_package`."""
    for loaded in plugins:
        console.debug(f"Running before_package of {loaded.ref}")
        result = _call("before_package", loaded, release)
        if isinstance(result, Err):
            return result
        if isinstance(result.value, Release):
            release = result.value
    return Ok(release)


def run_after_package(
    release: Release,
    plugins: Sequence[LoadedPlugin],
    *,
    console: ConsoleProtocol,
) -> Result[None, HookFailed]:
    """Run every plugin's `after_package`; only failures matter."""
    for loaded in plugins:
        console.debug(f"Running after_package of {loaded.ref}")
        result = _call("after_package", loaded, release)
        if isinstance(result, Err):
            return result
    return Ok(None)
