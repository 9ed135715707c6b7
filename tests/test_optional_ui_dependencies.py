"""Regression tests for the optional Rich dependency.

Bootstrap commands and error reporting must keep working as plain text
when Rich is missing, and the install spinner must degrade gracefully.
"""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest

from npm_global_exec.cli.app import cli, main
from npm_global_exec.cli.console import console, strip_markup


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)
    monkeypatch.setitem(sys.modules, "rich.status", None)


def test_help_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_errors_render_plain_without_rich(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)
    with patch("sys.argv", ["npm-global-exec"]):
        with pytest.raises(SystemExit) as exc_info:
            cli()

    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "Error: A package specifier is required." in err
    assert "[bold red]" not in err


def test_console_error_prints_hint(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)
    console.error("boom", "try this")
    err = capsys.readouterr().err
    assert "Error: boom" in err
    assert "Hint: try this" in err


def test_install_status_without_rich(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)
    from npm_global_exec.cli.progress import InstallStatus

    with InstallStatus("cowsay") as hook:
        hook({"status": "retrying", "exit_code": 190, "delay": 2.0, "retry": 1})

    assert "retrying cowsay in 2s" in capsys.readouterr().err


class TestStripMarkup:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("[bold red]Error:[/bold red] x", "Error: x"),
            ("[green]OK[/]", "OK"),
            ("plain [1.2.3] text", "plain [1.2.3] text"),
        ],
    )
    def test_strip(self, text: str, expected: str) -> None:
        assert strip_markup(text) == expected
