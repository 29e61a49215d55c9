"""Console output abstraction.

Release steps report progress through ``ConsoleProtocol`` rather than a
logger. ``RichConsole`` is the terminal backend; ``MockConsole`` records
output for tests.

Verbosity and styling are constructor arguments chosen by the CLI, so helpers
never read global flags.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    DONE = auto()  # final banner of a run
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Output interface used by commands and release steps."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def debug(self, message: str) -> None:
        """Print diagnostic detail, only when verbose."""
        ...

    def newline(self) -> None: ...


# Plain-text prefixes for terminals that cannot render styles (e.g. IDE output panes).
_PLAIN_PREFIXES: dict[Style, str] = {
    Style.SUCCESS: "[ OK ]\t\t",
    Style.ERROR: "[ ERROR ]\t",
    Style.WARNING: "[ WARNING ]\t",
    Style.DONE: "[ DONE ]\t",
}


class RichConsole:
    """Console implementation using Rich.

    Args:
        no_style: Print plain text with bracketed prefixes instead of markup.
        verbosity: 0 hides ``debug`` output, 1 or more shows it.
        stderr: Write to stderr, keeping stdout for command output.
    """

    def __init__(
        self, *, no_style: bool = False, verbosity: int = 0, stderr: bool = False
    ) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self.verbosity = verbosity
        self._no_style = no_style
        self._console = Console(no_color=no_style, highlight=not no_style, stderr=stderr)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.DONE: "black on green",
            Style.HEADER: "blue bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        if self._no_style:
            self._console.print(_PLAIN_PREFIXES.get(style, "") + message, markup=False)
            return
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        self.print(message, Style.SUCCESS)

    def error(self, message: str) -> None:
        self.print(message if self._no_style else f"error: {message}", Style.ERROR)

    def warning(self, message: str) -> None:
        self.print(message if self._no_style else f"warning: {message}", Style.WARNING)

    def info(self, message: str) -> None:
        self.print(message, Style.INFO)

    def header(self, message: str) -> None:
        self._console.print()
        self.print(message, Style.HEADER)

    def debug(self, message: str) -> None:
        if self.verbosity > 0:
            self.print(message, Style.DIM)

    def newline(self) -> None:
        self._console.print()


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)
    verbosity: int = 0

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def debug(self, message: str) -> None:
        if self.verbosity > 0:
            self.outputs.append(OutputRecord(message, Style.DIM))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
