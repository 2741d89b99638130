"""Console output abstraction.

Services write through `ConsoleProtocol` and never touch Rich. Levels
(success, error, warning, info, debug) share one prefix table so the Rich
backend and the recording backend print the same words.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DEBUG = auto()
    DIM = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


# level -> printed prefix
_PREFIX = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
    Style.INFO: "info:",
    Style.DEBUG: "debug:",
}

_RICH_STYLE = {
    Style.DEFAULT: "",
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DEBUG: "dim",
    Style.DIM: "dim",
    Style.HEADER: "blue bold",
}


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print `message` as is, in `style`."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def debug(self, message: str) -> None:
        """Diagnostic line; backends may drop it unless verbose."""
        ...

    def header(self, message: str) -> None: ...

    def newline(self) -> None: ...


class RichConsole:
    """Rich-backed console for the CLI.

    Messages are printed literally: paths and Erlang terms often contain
    square brackets, which Rich would otherwise read as markup.
    """

    def __init__(self, *, verbose: bool = False, stderr: bool = False) -> None:
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)
        self._verbose = verbose

    @property
    def verbose(self) -> bool:
        return self._verbose

    def _level(self, style: Style, message: str) -> None:
        from rich.markup import escape

        color = _RICH_STYLE[style]
        prefix = _PREFIX[style]
        if style is Style.DEBUG:
            self._console.print(f"[{color}]{prefix} {escape(message)}[/{color}]")
        else:
            self._console.print(f"[{color}]{prefix}[/{color}] {escape(message)}")

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._console.print(message, style=_RICH_STYLE[style] or None, markup=False)

    def success(self, message: str) -> None:
        self._level(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._level(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._level(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._level(Style.INFO, message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._level(Style.DEBUG, message)

    def header(self, message: str) -> None:
        self._console.print()
        self._console.print(message, style=_RICH_STYLE[Style.HEADER], markup=False)

    def newline(self) -> None:
        self._console.print()


@dataclass
class OutputRecord:
    message: str
    style: Style


def _no_records() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Records output instead of printing it.

    Debug lines are always recorded so tests can assert on them.
    """

    outputs: list[OutputRecord] = field(default_factory=_no_records)

    def _level(self, style: Style, message: str) -> None:
        self.outputs.append(OutputRecord(f"{_PREFIX[style]} {message}", style))

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._level(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._level(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._level(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._level(Style.INFO, message)

    def debug(self, message: str) -> None:
        self._level(Style.DEBUG, message)

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # assertions helpers

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [record.message for record in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return self.count(Style.ERROR) > 0

    def has_warning(self) -> bool:
        return self.count(Style.WARNING) > 0

    def find(self, substring: str) -> list[OutputRecord]:
        """Records whose message contains `substring`."""
        return [record for record in self.outputs if substring in record.message]

    def count(self, style: Style) -> int:
        return sum(1 for record in self.outputs if record.style is style)
