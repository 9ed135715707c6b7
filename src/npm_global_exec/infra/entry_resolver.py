"""Infrastructure: locate an installed package's executable entry.

Reads ``node_modules/<name>/package.json`` from the workspace and turns
its ``bin`` field into an absolute path.  Nothing is executed here.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from npm_global_exec.core.bin_entry import select_bin_path
from npm_global_exec.core.models import PackageSpecifier
from npm_global_exec.exceptions import BinFileNotFoundError, PackageNotFoundError
from npm_global_exec.infra.workspace import MANIFEST_NAME, Workspace

logger = logging.getLogger(__name__)


def load_package_manifest(package_dir: Path, package_name: str) -> dict[str, Any]:
    """Parse ``package.json`` inside *package_dir*.

    Raises
    ------
    PackageNotFoundError
        When the manifest is missing, unreadable or not a JSON object.
    """
    manifest_path = package_dir / MANIFEST_NAME
    if not manifest_path.is_file():
        raise PackageNotFoundError(
            f"Package {package_name} not found at {manifest_path}",
            hint="npm reported success but did not create the package directory.",
        )

    try:
        data: Any = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PackageNotFoundError(
            f"Cannot read manifest of {package_name} at {manifest_path}: {exc}",
        ) from exc

    if not isinstance(data, dict):
        raise PackageNotFoundError(
            f"Manifest of {package_name} at {manifest_path} is not a JSON object",
        )
    return data


def resolve_entry(workspace: Workspace, specifier: PackageSpecifier) -> Path:
    """Return the absolute path of *specifier*'s bin entry.

    Raises
    ------
    PackageNotFoundError
        If the installed package manifest is missing, or the name points
        outside ``node_modules``.
    NoBinEntryError
        If the manifest declares no usable ``bin``.
    BinFileNotFoundError
        If the declared file does not exist.
    """
    package_dir = workspace.package_dir(specifier.name)
    if not workspace.contains_package(specifier.name):
        raise PackageNotFoundError(
            f"Package {specifier.name} resolves to {package_dir}, "
            f"outside {workspace.node_modules}",
            hint="Use a registry package name such as cowsay or @scope/name.",
        )
    manifest = load_package_manifest(package_dir, specifier.name)
    relative = select_bin_path(manifest.get("bin"), specifier.name)

    bin_path = (package_dir / relative).absolute()
    if not bin_path.is_file():
        raise BinFileNotFoundError(
            f"Bin file not found: {bin_path}",
            hint=f"{specifier.name} declares bin {relative!r} but it was not installed.",
        )

    logger.info("Resolved %s to %s", specifier.name, bin_path)
    return bin_path
