"""Terminal output for the multiauth CLI.

Anything a script might capture goes to stdout: a saved credential from
``auth login``, the header record from ``auth sign``, the table from
``services list``. Everything addressed to the person at the keyboard
goes to stderr, including the authorization URL during an OAuth login.
That keeps ``multiauth auth login example > example.pickle`` safe.

Commands call the module-level helpers (:func:`print_data`,
:func:`error`, ...). They forward to the :class:`OutputManager` that
:func:`~multiauth.app.main_callback` installs from the root flags.
Verbose diagnostics are not routed through here; ``--verbose`` raises the
:mod:`logging` level instead.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How stdout data is rendered. ``AUTO`` picks ``RICH`` on a colour TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# Prefix and Rich style for each stderr message kind.
_STYLES: dict[str, tuple[str, str]] = {
    "info": ("", ""),
    "success": ("", "green"),
    "warning": ("Warning: ", "yellow"),
    "error": ("Error: ", "bold red"),
    "suggest": ("→ ", "dim"),
}


class OutputManager:
    """Render command results on stdout and messages on stderr.

    Args:
        format: Rendering for stdout data.
        no_color: Strip styling. Also forced by ``NO_COLOR`` and ``TERM=dumb``.
        quiet: Drop info, success and suggestion messages. Warnings,
            errors and stdout data are always written.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        if format == OutputFormat.AUTO:
            format = OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
        self._format = format
        self._console = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._err_console = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    def print_data(self, text: str) -> None:
        """Write *text* to stdout verbatim, without markup processing."""
        print(text, file=sys.stdout, flush=True)

    def print_record(self, record: dict[str, Any]) -> None:
        """Write one record: a JSON object, or ``key<TAB>value`` lines."""
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(record, indent=2, ensure_ascii=False, default=str))
            return
        for key, value in record.items():
            self.print_data(f"{key}\t{value}")

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows as a JSON array of objects, TSV, or a Rich table.

        *title* is only shown by the Rich rendering.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(
                json.dumps([dict(zip(headers, row)) for row in rows], indent=2, ensure_ascii=False)
            )
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(*headers, title=title, header_style="bold cyan")
            for row in rows:
                table.add_row(*row)
            self._console.print(table)

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def suggest(self, message: str) -> None:
        """Point at a follow-up command, e.g. after ``services add``."""
        self._emit("suggest", message)

    def _emit(self, kind: str, message: str) -> None:
        if self._quiet and kind not in ("warning", "error"):
            return
        prefix, style = _STYLES[kind]
        if self._no_color or not style:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
            return
        # Text objects are never parsed as markup, so brackets in URLs survive.
        if kind in ("warning", "error"):
            text = Text.assemble((prefix, style), message)
        else:
            text = Text(prefix + message, style=style)
        self._err_console.print(text)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one if none is set."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_record(record: dict[str, Any]) -> None:
    get_output().print_record(record)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)
