"""Operator console with optional Rich support.

All operator-facing output goes to stderr so the launched package owns
stdout.  Rich is imported lazily: ``--help``, ``--version`` and error
reporting keep working (as plain text) when it is not installed.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from npm_global_exec.exceptions import EnvironmentError

_MARKUP_TAG = re.compile(r"\[/?[a-z][a-z ]*\]")


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True)


def strip_markup(text: str) -> str:
    """Drop simple Rich style tags such as ``[bold red]`` and ``[/]``."""
    return _MARKUP_TAG.sub("", text).replace("[/]", "")


def escape_markup(text: str) -> str:
    """Escape ``[...]`` in *text* so Rich prints it literally."""
    try:
        from rich.markup import escape
    except ModuleNotFoundError:
        return text
    return escape(text)


class _ConsoleProxy:
    """``print``-compatible proxy that degrades to plain stderr output."""

    def print(self, *objects: object) -> None:
        try:
            rich_console = get_rich_console()
        except EnvironmentError:
            plain = [strip_markup(o) if isinstance(o, str) else o for o in objects]
            print(*plain, file=sys.stderr)
            return
        rich_console.print(*objects)

    def error(self, message: str, hint: str | None = None) -> None:
        """Render an error line plus optional hint block."""
        self.print(f"[bold red]Error:[/bold red] {escape_markup(message)}")
        if hint:
            self.print(f"[yellow]Hint:[/yellow] {escape_markup(hint)}")


console = _ConsoleProxy()
