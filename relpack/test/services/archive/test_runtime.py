"""Tests for relpack.services.archive.runtime - locating the Erlang runtime."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from relpack.core.result import Err, Ok, Result
from relpack.platform.process import ProcessError
from relpack.services.archive import runtime as runtime_mod
from relpack.services.archive.runtime import (
    RuntimeInfo,
    detect_runtime,
    erts_version_of,
    find_erts_dir,
)


def _fake_run(
    result: Result[str, ProcessError], calls: list[list[str]]
) -> Callable[..., Result[str, ProcessError]]:
    def run(
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        calls.append(cmd)
        return result

    return run


class TestDetectRuntime:
    def test_parses_root_and_version(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[list[str]] = []
        monkeypatch.setattr(runtime_mod, "run", _fake_run(Ok(f"{tmp_path}\n14.2\n"), calls))

        result = detect_runtime()

        assert result == Ok(RuntimeInfo(root=tmp_path.resolve(), erts_version="14.2"))
        assert calls[0][:3] == ["erl", "-noshell", "-eval"]

    def test_custom_erl_binary(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[list[str]] = []
        monkeypatch.setattr(runtime_mod, "run", _fake_run(Ok(f"{tmp_path}\n15.0\n"), calls))

        detect_runtime(erl="/opt/otp/bin/erl")

        assert calls[0][0] == "/opt/otp/bin/erl"

    def test_ignores_blank_lines(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(runtime_mod, "run", _fake_run(Ok(f"\n{tmp_path}\n\n14.2\n"), []))

        result = detect_runtime()

        assert isinstance(result, Ok)
        assert result.value.erts_version == "14.2"

    def test_erl_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        error = ProcessError(("erl",), -1, "", "[Errno 2] No such file or directory: 'erl'")
        monkeypatch.setattr(runtime_mod, "run", _fake_run(Err(error), []))

        result = detect_runtime()

        assert isinstance(result, Err)
        assert "No such file or directory" in result.error.detail

    def test_failure_without_stderr_uses_command(self, monkeypatch: pytest.MonkeyPatch) -> None:
        error = ProcessError(("erl", "-noshell"), 1, "", "")
        monkeypatch.setattr(runtime_mod, "run", _fake_run(Err(error), []))

        result = detect_runtime()

        assert isinstance(result, Err)
        assert result.error.detail == "erl -noshell failed (exit 1)"

    def test_unexpected_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(runtime_mod, "run", _fake_run(Ok("garbage\n"), []))

        result = detect_runtime()

        assert isinstance(result, Err)
        assert "unexpected output" in result.error.detail


class TestErtsDirectories:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("erts-14.2", "14.2"),
            ("erts-10.7.2.1", "10.7.2.1"),
            ("erts-15.0-rc1", "15.0-rc1"),
            ("erts-", None),
            ("erts-x1", None),
            ("lib", None),
        ],
    )
    def test_erts_version_of(self, name: str, expected: str | None) -> None:
        assert erts_version_of(Path("/otp") / name) == expected

    def test_find_erts_dir_accepts_the_erts_dir_itself(self, tmp_path: Path) -> None:
        erts = tmp_path / "erts-14.2"
        erts.mkdir()

        assert find_erts_dir(erts) == erts

    def test_find_erts_dir_under_root(self, tmp_path: Path) -> None:
        (tmp_path / "lib").mkdir()
        (tmp_path / "erts-14.2").mkdir()

        assert find_erts_dir(tmp_path) == tmp_path / "erts-14.2"

    def test_find_erts_dir_picks_last_in_sort_order(self, tmp_path: Path) -> None:
        (tmp_path / "erts-13.0").mkdir()
        (tmp_path / "erts-14.2").mkdir()
        (tmp_path / "erts-14.2.tar").write_text("", encoding="utf-8")

        assert find_erts_dir(tmp_path) == tmp_path / "erts-14.2"

    def test_find_erts_dir_none(self, tmp_path: Path) -> None:
        (tmp_path / "lib").mkdir()

        assert find_erts_dir(tmp_path) is None
        assert find_erts_dir(tmp_path / "missing") is None

    def test_runtime_paths(self, tmp_path: Path) -> None:
        info = RuntimeInfo(root=tmp_path, erts_version="14.2")

        assert info.lib_dir == tmp_path / "lib"
        assert info.erts_dir == tmp_path / "erts-14.2"
