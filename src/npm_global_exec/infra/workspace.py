"""Infrastructure: the persistent per-user install workspace.

The workspace is a plain npm project that every package is installed
into::

    ~/cloudbase-mcp/
    ├── package.json       seeded once, never overwritten
    ├── .npmrc             seeded once, never overwritten
    ├── npm-install.log    append-only install log
    └── node_modules/<name>/

Rules
-----
* Seed files are skip-if-exists so user edits persist across runs.
* Creation failures are fatal (:class:`WorkspaceInitError`).
* Package-tree removal is best effort and reports, never raises.
* Nothing outside ``node_modules`` is ever removed.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from npm_global_exec.core.models import CleanupResult
from npm_global_exec.exceptions import WorkspaceInitError

logger = logging.getLogger(__name__)

WORKSPACE_DIRNAME = "cloudbase-mcp"
DEFAULT_REGISTRY = "https://mirrors.cloud.tencent.com/npm/"

HOME_ENV_VAR = "NPM_GLOBAL_EXEC_HOME"
REGISTRY_ENV_VAR = "NPM_GLOBAL_EXEC_REGISTRY"

MANIFEST_NAME = "package.json"
NPMRC_NAME = ".npmrc"
LOG_NAME = "npm-install.log"


# ---------------------------------------------------------------------------
# Workspace value
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Workspace:
    """Resolved workspace location; every other path derives from it."""

    root: Path

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_NAME

    @property
    def npmrc_path(self) -> Path:
        return self.root / NPMRC_NAME

    @property
    def log_path(self) -> Path:
        return self.root / LOG_NAME

    @property
    def node_modules(self) -> Path:
        return self.root / "node_modules"

    def package_dir(self, package_name: str) -> Path:
        """Installed tree for *package_name* (scoped names nest one level)."""
        return self.node_modules.joinpath(*package_name.split("/"))

    def contains_package(self, package_name: str) -> bool:
        """Whether *package_name* maps to a directory below ``node_modules``.

        The check is lexical so a symlinked package (``npm link``) still
        counts as inside.
        """
        base = Path(os.path.abspath(self.node_modules))
        target = Path(os.path.abspath(self.package_dir(package_name)))
        return target != base and target.is_relative_to(base)


def default_workspace_root() -> Path:
    """Return ``$NPM_GLOBAL_EXEC_HOME`` or ``~/cloudbase-mcp``."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / WORKSPACE_DIRNAME


def resolve_workspace(root: str | Path | None = None) -> Workspace:
    """Build a :class:`Workspace` from an explicit root or the defaults."""
    base = Path(root).expanduser() if root is not None else default_workspace_root()
    return Workspace(root=base.resolve())


def configured_registry() -> str:
    """Registry URL written into a freshly seeded ``.npmrc``."""
    return os.environ.get(REGISTRY_ENV_VAR) or DEFAULT_REGISTRY


def read_registry(workspace: Workspace) -> str | None:
    """Return the ``registry=`` value from the workspace ``.npmrc``, if any."""
    try:
        text = workspace.npmrc_path.read_text(encoding="utf-8")
    except OSError:
        return None
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() == "registry":
            return value.strip()
    return None


# ---------------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------------

def _default_manifest() -> dict[str, object]:
    return {
        "name": "cloudbase-mcp-packages",
        "version": "1.0.0",
        "description": "User directory for npm-global-exec packages",
        "private": True,
        "dependencies": {},
    }


def ensure_workspace(workspace: Workspace, *, registry: str | None = None) -> None:
    """Create the workspace and its seed files if they are missing.

    Safe to call on every run: existing files are left untouched.

    Raises
    ------
    WorkspaceInitError
        When the directory or a seed file cannot be written.
    """
    try:
        if not workspace.root.is_dir():
            logger.info("Creating install directory: %s", workspace.root)
            workspace.root.mkdir(parents=True, exist_ok=True)

        if not workspace.manifest_path.exists():
            workspace.manifest_path.write_text(
                json.dumps(_default_manifest(), indent=2),
                encoding="utf-8",
            )
            logger.info("Initialized %s in install directory", MANIFEST_NAME)

        if not workspace.npmrc_path.exists():
            target = registry or configured_registry()
            workspace.npmrc_path.write_text(f"registry={target}\n", encoding="utf-8")
            logger.info("Initialized %s with registry %s", NPMRC_NAME, target)
    except OSError as exc:
        raise WorkspaceInitError(
            f"Cannot prepare install directory {workspace.root}: {exc}",
            hint=f"Check permissions, or point {HOME_ENV_VAR} at a writable directory.",
        ) from exc


# ---------------------------------------------------------------------------
# Package tree cleanup
# ---------------------------------------------------------------------------

def remove_package_tree(workspace: Workspace, package_name: str) -> CleanupResult:
    """Force-delete ``node_modules/<package_name>``; never raises for I/O."""
    target = workspace.package_dir(package_name)
    if not workspace.contains_package(package_name):
        logger.warning("Refusing to remove %s: outside %s", target, workspace.node_modules)
        return CleanupResult(
            path=target,
            existed=False,
            removed=False,
            error=f"{target} is outside {workspace.node_modules}",
        )

    existed = target.exists() or target.is_symlink()
    if not existed:
        return CleanupResult(path=target, existed=False, removed=True)

    try:
        if target.is_symlink() or target.is_file():
            target.unlink()
        else:
            shutil.rmtree(target)
    except OSError as exc:
        return CleanupResult(path=target, existed=True, removed=False, error=str(exc))
    return CleanupResult(path=target, existed=True, removed=True)


class WorkspaceTreeCleaner:
    """Bind :func:`remove_package_tree` to one workspace."""

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def __call__(self, package_name: str) -> CleanupResult:
        return remove_package_tree(self._workspace, package_name)
