from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from relpack import __version__
from relpack.cli.app import app
from relpack.core.errors import ErrorCode
from relpack.services.archive.beam import parse_beam
from relpack.test._release_tree import ERTS_VSN, NAME, VERSION, ReleaseTree

runner = CliRunner()


def _config(tmp_path: Path, profile: str = "include_erts = false\n") -> Path:
    path = tmp_path / "relpack.toml"
    path.write_text(
        f"""
[release]
name = "{NAME}"
version = "{VERSION}"
output_dir = "rel"

[profile]
{profile}
[runtime]
root = "otp"
erts_version = "{ERTS_VSN}"
""",
        encoding="utf-8",
    )
    return path


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_archive_writes_tarball(release_tree: ReleaseTree, tmp_path: Path) -> None:
    config = _config(tmp_path)

    result = runner.invoke(app, ["archive", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert "OK" in result.output
    tarball = release_tree.output_dir / "releases" / VERSION / f"{NAME}.tar.gz"
    assert f"releases/{VERSION}/vm.args" in release_tree.members(tarball)


def test_archive_uses_pinned_runtime(release_tree: ReleaseTree, tmp_path: Path) -> None:
    config = _config(tmp_path, "include_erts = true\ninclude_system_libs = false\n")

    result = runner.invoke(app, ["archive", "-c", str(config), "-v"])

    assert result.exit_code == 0, result.output
    assert "Updating tarball" in result.output
    tarball = release_tree.output_dir / "releases" / VERSION / f"{NAME}.tar.gz"
    assert f"erts-{ERTS_VSN}/bin/erlexec" in release_tree.members(tarball)


def test_archive_missing_config(tmp_path: Path) -> None:
    result = runner.invoke(app, ["archive", "--config", str(tmp_path / "missing.toml")])

    assert result.exit_code == int(ErrorCode.USER_ERROR)
    assert "not found" in result.output


def test_archive_build_failure_exit_code(release_tree: ReleaseTree, tmp_path: Path) -> None:
    (release_tree.output_dir / "releases" / VERSION / f"{NAME}.rel").unlink()
    config = _config(tmp_path)

    result = runner.invoke(app, ["archive", "--config", str(config)])

    assert result.exit_code == int(ErrorCode.BUILD_ERROR)
    assert "stage: make_tar" in result.output


def test_strip_command(release_tree: ReleaseTree) -> None:
    beam = release_tree.output_dir / "lib" / f"{NAME}-{VERSION}" / "ebin" / f"{NAME}.beam"

    result = runner.invoke(app, ["strip", str(release_tree.output_dir)])

    assert result.exit_code == 0, result.output
    assert "stripped 4 modules" in result.output
    parsed = parse_beam(beam.read_bytes())
    assert "Dbgi" not in [c.id for c in parsed.unwrap()]


def test_strip_command_failure(tmp_path: Path) -> None:
    result = runner.invoke(app, ["strip", str(tmp_path / "missing")])

    assert result.exit_code == int(ErrorCode.BUILD_ERROR)
    assert "failed to strip release" in result.output
