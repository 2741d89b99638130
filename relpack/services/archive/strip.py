"""Debug-info stripping policy for release trees."""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path

from relpack.core.result import Err, Ok, Result
from relpack.output.console import ConsoleProtocol
from relpack.release.errors import StripFailed
from relpack.release.model import Release
from relpack.services.archive.beam import strip_beam_tree

__all__ = ["StripDecision", "decide_strip", "strip_release"]

HOT_UPGRADE_WARNING = (
    "You have strip_debug_info set to true.\n"
    "    Please be aware that if you plan on performing hot upgrades later,\n"
    "    this setting will prevent you from doing so without a rolling restart.\n"
    "    You may ignore this warning if you have no plans to use hot upgrades."
)

UPGRADE_WARNING = (
    "You have strip_debug_info set in your release configuration,\n"
    "    and you are performing an upgrade. This release will not be stripped,\n"
    "    however if you built your previous release with stripped debug information\n"
    "    this upgrade will fail, because the release handler will be unable to examine\n"
    "    the previous version's BEAM files. If you are using upgrades, it is recommended\n"
    "    that you do not set strip_debug_info."
)

DEV_MODE_WARNING = (
    "You have strip_debug_info set while dev_mode is true,\n"
    "    this release will not be stripped, because it would result in\n"
    "    the symlinked BEAM files from Erlang/Elixir to be stripped as well."
)


class StripDecision(Enum):
    STRIP = auto()
    SKIP_UPGRADE = auto()
    SKIP_DEV_MODE = auto()
    NOOP = auto()


def decide_strip(release: Release) -> StripDecision:
    """Pick a `StripDecision`; the first matching rule wins."""
    profile = release.profile
    if not profile.strip_debug_info:
        return StripDecision.NOOP
    if not release.is_upgrade and not profile.dev_mode:
        return StripDecision.STRIP
    if release.is_upgrade and not profile.dev_mode:
        return StripDecision.SKIP_UPGRADE
    return StripDecision.SKIP_DEV_MODE


def strip_release(
    release: Release, tree_root: Path, *, console: ConsoleProtocol
) -> Result[None, StripFailed]:
    """Strip debug chunks from the modules under `tree_root`, if allowed.

    Upgrades keep their debug chunks because the release handler reads them
    in both the from and to versions. Dev-mode trees are symlinked into the
    base installation, so stripping them would rewrite shared files.
    """
    match decide_strip(release):
        case StripDecision.STRIP:
            console.warning(HOT_UPGRADE_WARNING)
            console.debug(f"Stripping release ({tree_root})")
            result = strip_beam_tree(tree_root)
            if isinstance(result, Err):
                return Err(StripFailed(str(result.error)))
            console.debug(f"Stripped {len(result.value)} modules")
        case StripDecision.SKIP_UPGRADE:
            console.warning(UPGRADE_WARNING)
        case StripDecision.SKIP_DEV_MODE:
            console.warning(DEV_MODE_WARNING)
        case StripDecision.NOOP:
            pass
    return Ok(None)
