"""npm backed implementation of :class:`~npm_global_exec.core.protocols.PackageManager`.

This module is the **only** place in the codebase that runs ``npm``.
Spawn failures are caught here and re-raised as
:class:`~npm_global_exec.exceptions.InstallSpawnError`; a non-zero exit
is returned to the core layer as data.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from npm_global_exec.core.models import InstallResult
from npm_global_exec.exceptions import InstallSpawnError, UsageError
from npm_global_exec.infra.tool_detector import is_windows, node_install_hint, npm_executable

logger = logging.getLogger(__name__)

# Special to cmd.exe outside double quotes.
_CMD_METACHARACTERS = frozenset(" \t^&|<>()")
# Still special inside double quotes.
_CMD_UNQUOTABLE = frozenset('"%')


def cmd_quote(arg: str) -> str:
    """Quote *arg* for a ``cmd.exe`` command line.

    Raises
    ------
    UsageError
        When *arg* holds a character cmd.exe would still interpret.
    """
    if any(ch in _CMD_UNQUOTABLE for ch in arg):
        raise UsageError(
            f"{arg!r} cannot be passed to npm through cmd.exe",
            hint="Remove '\"' and '%' from the package specifier.",
        )
    if not arg or any(ch in _CMD_METACHARACTERS for ch in arg):
        return f'"{arg}"'
    return arg


class NpmPackageManager:
    """Concrete :class:`PackageManager` running ``npm install`` in a workspace.

    Usage::

        manager = NpmPackageManager(workspace.root)
        result = manager.install("cowsay@1.6.0")

    The registry is not passed on the command line; npm picks it up
    from the workspace ``.npmrc``.
    """

    def __init__(self, cwd: Path) -> None:
        self._cwd: Path = cwd

    @staticmethod
    def build_command(specifier: str) -> list[str]:
        """Return the argv for installing *specifier*."""
        return [npm_executable(), "install", specifier]

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def install(self, specifier: str) -> InstallResult:
        """Run ``npm install <specifier>`` and stream its output to the log.

        stdin is closed so npm can never block on a prompt; stderr is
        merged into stdout so the log keeps npm's own ordering.

        Raises
        ------
        InstallSpawnError
            When npm cannot be started (missing executable, permissions).
        UsageError
            On Windows, when the specifier cannot be quoted for cmd.exe.
        """
        cmd = self.build_command(specifier)
        windows = is_windows()
        args: str | list[str] = " ".join(cmd_quote(a) for a in cmd) if windows else cmd
        logger.debug("Running %s in %s", " ".join(cmd), self._cwd)

        try:
            proc = subprocess.Popen(
                args,
                cwd=self._cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                # npm.cmd is a batch script and needs cmd.exe to run, so the
                # command line is pre-quoted for cmd.exe.
                shell=windows,
            )
        except FileNotFoundError as exc:
            logger.error("npm command not found: %s", exc)
            raise InstallSpawnError(
                "npm command not found!",
                hint=node_install_hint(cmd[0]),
            ) from exc
        except OSError as exc:
            logger.error("Could not start npm: %s", exc)
            raise InstallSpawnError(
                f"Error starting npm for {specifier}: {exc}",
                hint=node_install_hint(cmd[0]),
            ) from exc

        output: list[str] = []
        if proc.stdout is not None:
            with proc.stdout:
                for line in proc.stdout:
                    text = line.rstrip("\r\n")
                    output.append(text)
                    logger.info("npm | %s", text)
        exit_code = proc.wait()

        logger.info("npm exited with code %d", exit_code)
        return InstallResult(exit_code=exit_code, output=tuple(output))
