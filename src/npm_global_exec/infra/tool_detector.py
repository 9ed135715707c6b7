"""Infrastructure: Node.js tool detection and platform guidance.

Locates ``node`` and ``npm`` on the system PATH and provides
platform-specific Node.js installation guidance when either is missing.

Rules
-----
* Detection via :func:`shutil.which` only — no subprocess.
* No permanent PATH modification.
* No automatic installation.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of a PATH probe for one executable.

    Attributes
    ----------
    name : str
        Executable that was looked up (``node`` or ``npm``).
    found : bool
        Whether the executable was located on PATH.
    path : Path | None
        Absolute path to the executable, or ``None``.
    version_hint : str
        Human-readable status string (e.g. ``"found at …"`` or ``"not found"``).
    install_commands : tuple[str, ...]
        Suggested shell commands for installing Node.js on the current
        platform.  Empty when the tool is already present.
    """

    name: str
    found: bool
    path: Path | None
    version_hint: str
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Platform helpers
# ---------------------------------------------------------------------------

def is_windows() -> bool:
    return platform.system().lower() == "windows"


def npm_executable() -> str:
    """Name of the npm launcher; Windows ships it as a ``.cmd`` script."""
    return "npm.cmd" if is_windows() else "npm"


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_tool(name: str) -> ToolStatus:
    """Probe PATH for *name*.

    Returns a :class:`ToolStatus` regardless of whether the tool is
    present — the caller decides whether to abort or merely warn.
    """
    result = shutil.which(name)

    if result is not None:
        resolved = Path(result).resolve()
        return ToolStatus(
            name=name,
            found=True,
            path=resolved,
            version_hint=f"found at {resolved}",
            install_commands=(),
        )

    return ToolStatus(
        name=name,
        found=False,
        path=None,
        version_hint="not found",
        install_commands=platform_install_commands(),
    )


def detect_node() -> ToolStatus:
    return detect_tool("node")


def detect_npm() -> ToolStatus:
    return detect_tool(npm_executable())


def node_install_hint(tool: str) -> str:
    """Multi-line troubleshooting hint shown when *tool* cannot be started."""
    lines = [
        f"Make sure Node.js and npm are installed and '{tool}' is on PATH.",
        "Install Node.js using one of:",
    ]
    lines.extend(f"  {cmd}" for cmd in platform_install_commands())
    lines.append("Restart your terminal after installing Node.js.")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def platform_install_commands() -> tuple[str, ...]:
    """Return Node.js install commands appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install OpenJS.NodeJS.LTS",
            "choco install nodejs-lts",
        )
    if system == "linux":
        return (
            "sudo apt install nodejs npm",
            "sudo dnf install nodejs npm",
            "sudo pacman -S nodejs npm",
        )
    if system == "darwin":
        return ("brew install node",)
    return ("Download Node.js from https://nodejs.org/",)
