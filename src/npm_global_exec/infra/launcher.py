"""Infrastructure: run a resolved bin entry under Node.js.

The child inherits stdin, stdout and stderr untouched, so the package
talks to the operator's terminal directly.  Its exit status is handed
back to the CLI layer, which exits with exactly that code.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from npm_global_exec.exceptions import LaunchSpawnError
from npm_global_exec.infra.tool_detector import node_install_hint

logger = logging.getLogger(__name__)

SIGNAL_EXIT_BASE = 128
"""POSIX shells report a child killed by signal N as ``128 + N``."""


def normalize_exit_code(returncode: int) -> int:
    """Map :mod:`subprocess` return codes to a process exit status.

    A negative code ``-N`` means the child died from signal ``N``.
    """
    if returncode < 0:
        return SIGNAL_EXIT_BASE + (-returncode)
    return returncode


class NodeLauncher:
    """Spawn ``node <bin> <args...>`` with inherited standard streams."""

    def __init__(self, node: str | None = None) -> None:
        self._node: str = node or shutil.which("node") or "node"

    def build_command(self, bin_path: Path, args: Sequence[str]) -> list[str]:
        return [self._node, str(bin_path), *args]

    def launch(self, bin_path: Path, args: Sequence[str] = ()) -> int:
        """Run *bin_path* to completion and return its exit status.

        Raises
        ------
        LaunchSpawnError
            When the Node.js runtime cannot be started.
        """
        cmd = self.build_command(bin_path, args)
        logger.info("Executing %s", " ".join(cmd))

        try:
            completed = subprocess.run(cmd, check=False)
        except OSError as exc:
            logger.error("Error executing %s: %s", bin_path, exc)
            raise LaunchSpawnError(
                f"Error executing {bin_path}: {exc}",
                hint=node_install_hint("node"),
            ) from exc

        exit_code = normalize_exit_code(completed.returncode)
        logger.info("%s exited with code %d", bin_path.name, exit_code)
        return exit_code
