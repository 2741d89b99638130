from __future__ import annotations

from relpack.test.architecture._utils import (
    iter_python_files,
    iter_source_files,
    matches_prefix,
    package_root,
    parse_imports,
)


def _offenders(subpackage: str, forbidden: tuple[str, ...]) -> list[str]:
    root = package_root()
    offenders: list[str] = []
    for file_path in iter_python_files(root / subpackage):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if any(matches_prefix(item.module, prefix) for prefix in forbidden):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")
    return offenders


def test_services_do_not_import_cli_modules() -> None:
    offenders = _offenders("services", ("relpack.cli", "typer"))

    assert not offenders, "services -> cli dependency violations:\n" + "\n".join(offenders)


def test_release_model_is_a_leaf() -> None:
    offenders = _offenders(
        "release", ("relpack.services", "relpack.cli", "relpack.output", "relpack.platform")
    )

    assert not offenders, "release dependency violations:\n" + "\n".join(offenders)


def test_platform_does_not_import_services() -> None:
    offenders = _offenders("platform", ("relpack.services", "relpack.cli", "relpack.output"))

    assert not offenders, "platform dependency violations:\n" + "\n".join(offenders)


def test_rich_is_only_used_by_console() -> None:
    root = package_root()
    allowlist = {"output/console.py"}
    offenders: list[str] = []

    for file_path in iter_source_files():
        rel = file_path.relative_to(root).as_posix()
        if rel in allowlist:
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "rich"):
                offenders.append(f"{rel}:{item.line}: direct rich import '{item.module}'")

    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)
