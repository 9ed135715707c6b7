"""CLI application entry point and command routing for npm-global-exec.

This module is the **sole error boundary** for the entire application.
It catches :class:`~npm_global_exec.exceptions.NpmGlobalExecError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
operator-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* Operator output goes to stderr; stdout belongs to the launched package.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from npm_global_exec.cli import exit_codes
from npm_global_exec.cli.console import console, escape_markup
from npm_global_exec.exceptions import NpmGlobalExecError, UsageError
from npm_global_exec.infra.workspace import HOME_ENV_VAR, Workspace, resolve_workspace
from npm_global_exec.version import __version__

PROG = "npm-global-exec"

# Options that consume the following token as their value.
_VALUE_OPTIONS = frozenset({"--workspace"})


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Options must come before the package specifier; everything after it
    is forwarded to the package untouched, including ``--help``.
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        allow_abbrev=False,
        usage=f"{PROG} [options] <package-name> [args...]",
        description=(
            "Install an npm package into a private per-user directory "
            "and run its executable."
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--workspace",
        metavar="DIR",
        default=None,
        help=f"Install directory (default: ${HOME_ENV_VAR} or ~/cloudbase-mcp).",
    )
    parser.add_argument(
        "--doctor",
        action="store_true",
        help="Check that Node.js, npm and the install directory are usable.",
    )
    parser.add_argument(
        "specifier",
        nargs="?",
        default=None,
        help="Package to run: name, name@version, @scope/name or @scope/name@version.",
    )
    return parser


def _split_argv(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split *argv* into our own arguments and the package's arguments.

    The first positional token is the specifier.  Every token after it
    belongs to the package, ``--`` included, and argparse never sees it.
    """
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == "--":
            index += 1
            break
        if token in _VALUE_OPTIONS:
            index += 2
            continue
        if token == "-" or not token.startswith("-"):
            break
        index += 1
    return list(argv[: index + 1]), list(argv[index + 1 :])


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_run(specifier: str, child_args: Sequence[str], workspace: Workspace) -> int:
    """Install *specifier* and run its bin entry.

    Flow:
    1. Parse the specifier and prepare the workspace.
    2. Install with the retrying install service (output → install log).
    3. Resolve the bin entry from the installed manifest.
    4. Launch it and return its exit code.
    """
    from npm_global_exec.cli.progress import InstallStatus
    from npm_global_exec.core.install_service import InstallService
    from npm_global_exec.core.specifier import parse_specifier
    from npm_global_exec.infra.entry_resolver import resolve_entry
    from npm_global_exec.infra.install_log import install_log
    from npm_global_exec.infra.launcher import NodeLauncher
    from npm_global_exec.infra.npm_runner import NpmPackageManager
    from npm_global_exec.infra.workspace import WorkspaceTreeCleaner, ensure_workspace

    spec = parse_specifier(specifier)
    ensure_workspace(workspace)

    with install_log(workspace.log_path):
        console.print(
            f"[bold]Installing {escape_markup(spec.raw)}[/bold] "
            f"in {escape_markup(str(workspace.root))}"
        )

        service = InstallService(
            NpmPackageManager(workspace.root),
            WorkspaceTreeCleaner(workspace),
            log_path=workspace.log_path,
        )
        with InstallStatus(spec.raw) as hook:
            outcome = service.install(spec, progress_callback=hook)

        retried = f" after {outcome.retries} retries" if outcome.retries else ""
        console.print(f"[green]Successfully installed {spec.raw}{retried}[/green]")

        bin_path = resolve_entry(workspace, spec)
        console.print(f"[dim]Executing {spec.name}…[/dim]")
        return NodeLauncher().launch(bin_path, child_args)


def _handle_doctor(workspace: Workspace) -> int:
    """Dispatch the ``--doctor`` diagnostics command."""
    from npm_global_exec.cli.doctor import run_doctor

    return run_doctor(workspace)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the npm-global-exec CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code; the launched package's own code on a run.

    Raises
    ------
    UsageError
        When neither a specifier nor ``--doctor`` was given.
    """
    own_args, child_args = _split_argv(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_args(own_args)

    if args.doctor:
        return _handle_doctor(resolve_workspace(args.workspace))

    if not args.specifier:
        parser.print_usage(sys.stderr)
        raise UsageError(
            "A package specifier is required.",
            hint=f"Usage: {PROG} <package-name> [args...]",
        )

    return _handle_run(args.specifier, child_args, resolve_workspace(args.workspace))


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except UsageError as exc:
        console.error(str(exc), exc.hint)
        sys.exit(exit_codes.USAGE_ERROR)
    except NpmGlobalExecError as exc:
        console.error(str(exc), exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
