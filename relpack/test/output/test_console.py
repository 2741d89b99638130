"""Tests for relpack.output.console module."""

from __future__ import annotations

import pytest

from relpack.output.console import ConsoleProtocol, MockConsole, OutputRecord, RichConsole, Style


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.DEBUG) == "debug"

    def test_all_styles_exist(self) -> None:
        expected = {"DEFAULT", "SUCCESS", "ERROR", "WARNING", "INFO", "DEBUG", "DIM", "HEADER"}
        assert {s.name for s in Style} == expected


class TestMockConsole:
    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("hello", Style.DIM)
        assert console.outputs == [OutputRecord("hello", Style.DIM)]

    @pytest.mark.parametrize(
        ("method", "prefix", "style"),
        [
            ("success", "OK ", Style.SUCCESS),
            ("error", "error: ", Style.ERROR),
            ("warning", "warning: ", Style.WARNING),
            ("info", "info: ", Style.INFO),
            ("debug", "debug: ", Style.DEBUG),
        ],
    )
    def test_prefixed_levels(self, method: str, prefix: str, style: Style) -> None:
        console = MockConsole()
        getattr(console, method)("payload")
        assert console.outputs == [OutputRecord(f"{prefix}payload", style)]

    def test_helpers(self) -> None:
        console = MockConsole()
        console.warning("dev_mode is true")
        console.debug("Updating tarball")
        console.newline()

        assert console.has_warning()
        assert not console.has_error()
        assert console.count(Style.DEBUG) == 1
        assert [o.message for o in console.find("tarball")] == ["debug: Updating tarball"]
        assert console.messages == ["warning: dev_mode is true", "debug: Updating tarball", ""]
        assert console.text == "warning: dev_mode is true\ndebug: Updating tarball\n"

        console.clear()
        assert console.outputs == []

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.header("Archive")
        assert isinstance(console, MockConsole)


class TestRichConsole:
    def test_debug_hidden_unless_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().debug("hidden line")
        RichConsole(verbose=True).debug("shown line")

        out = capsys.readouterr().out
        assert "hidden line" not in out
        assert "debug: shown line" in out

    def test_markup_in_messages_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.error("{release, [kernel]} failed")
        console.success("/tmp/[red]x.tar.gz")

        out = capsys.readouterr().out
        assert "error: {release, [kernel]} failed" in out
        assert "/tmp/[red]x.tar.gz" in out

    def test_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole(stderr=True).warning("careful")

        captured = capsys.readouterr()
        assert "careful" in captured.err
        assert "careful" not in captured.out

    def test_verbose_property(self) -> None:
        assert RichConsole(verbose=True).verbose is True
        assert RichConsole().verbose is False
