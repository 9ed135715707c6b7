"""``npm-global-exec --doctor`` — environment diagnostics.

Gathers system information and renders a Rich table summarising
whether the runtime environment can install and run npm packages.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys

from npm_global_exec.cli import exit_codes
from npm_global_exec.cli.console import console, strip_markup
from npm_global_exec.infra.tool_detector import ToolStatus, detect_node, detect_npm
from npm_global_exec.infra.workspace import (
    Workspace,
    configured_registry,
    read_registry,
)
from npm_global_exec.version import __version__

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _version_check() -> Check:
    return "npm-global-exec", __version__, "[green]OK[/green]"


def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _tool_check(label: str, status_obj: ToolStatus) -> Check:
    if status_obj.found:
        path_str = str(status_obj.path) if status_obj.path else "found"
        return label, path_str, "[green]OK[/green]"
    return label, "not found", "[red]FAIL[/red]"


def _workspace_check(workspace: Workspace) -> Check:
    if workspace.root.is_dir():
        return "Workspace", str(workspace.root), "[green]OK[/green]"
    return "Workspace", f"{workspace.root} (will be created)", "[yellow]WARN[/yellow]"


def _registry_check(workspace: Workspace) -> Check:
    registry = read_registry(workspace)
    if registry:
        return "Registry", registry, "[green]OK[/green]"
    return "Registry", f"{configured_registry()} (default)", "[green]OK[/green]"


def _os_check() -> Check:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    return strip_markup(status)


def _render_plain(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    print("\nnpm-global-exec doctor", file=sys.stderr)
    print("=" * 72, file=sys.stderr)
    print(f"{'Component':<16} {'Value':<44} {'Status':<8}", file=sys.stderr)
    print("-" * 72, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<16} {value:<44} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def _render_rich(checks: list[Check]) -> bool:
    """Render doctor output as a Rich table; ``False`` if Rich is missing."""
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        return False

    table = Table(
        title="npm-global-exec doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()
    return True


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(workspace: Workspace) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if node or npm is missing.
    """
    node_status = detect_node()
    npm_status = detect_npm()
    checks = [
        _version_check(),
        _python_version_check(),
        _tool_check("node", node_status),
        _tool_check("npm", npm_status),
        _workspace_check(workspace),
        _registry_check(workspace),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    if not _render_rich(checks):
        _render_plain(checks)

    missing = next((s for s in (node_status, npm_status) if not s.found), None)
    if missing is not None and missing.install_commands:
        console.print("[yellow]Node.js is not fully installed.[/yellow]")
        console.print("Install using one of the following commands:\n")
        for cmd in missing.install_commands:
            console.print(f"  [bold]{cmd}[/bold]")
        console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
