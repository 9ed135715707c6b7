"""Infrastructure layer — external system integration.

This layer wraps all interaction with npm, Node.js and the filesystem.
Every raw ``OSError`` or parse error must be caught here and re-raised
as a :class:`~npm_global_exec.exceptions.NpmGlobalExecError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from npm_global_exec.infra.entry_resolver import load_package_manifest, resolve_entry
from npm_global_exec.infra.install_log import install_log
from npm_global_exec.infra.launcher import NodeLauncher, normalize_exit_code
from npm_global_exec.infra.npm_runner import NpmPackageManager
from npm_global_exec.infra.tool_detector import ToolStatus, detect_node, detect_npm, detect_tool
from npm_global_exec.infra.workspace import (
    Workspace,
    WorkspaceTreeCleaner,
    ensure_workspace,
    remove_package_tree,
    resolve_workspace,
)

__all__: list[str] = [
    "NodeLauncher",
    "NpmPackageManager",
    "ToolStatus",
    "Workspace",
    "WorkspaceTreeCleaner",
    "detect_node",
    "detect_npm",
    "detect_tool",
    "ensure_workspace",
    "install_log",
    "load_package_manifest",
    "normalize_exit_code",
    "remove_package_tree",
    "resolve_entry",
    "resolve_workspace",
]
