"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or subprocess I/O; adapters are injected.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from npm_global_exec.core.bin_entry import select_bin_path
from npm_global_exec.core.install_service import InstallService
from npm_global_exec.core.models import (
    CleanupResult,
    InstallOutcome,
    InstallResult,
    PackageSpecifier,
    RetryPolicy,
)
from npm_global_exec.core.protocols import PackageManager, PackageTreeCleaner
from npm_global_exec.core.specifier import canonical_package_name, parse_specifier

__all__: list[str] = [
    "CleanupResult",
    "InstallOutcome",
    "InstallResult",
    "InstallService",
    "PackageManager",
    "PackageSpecifier",
    "PackageTreeCleaner",
    "RetryPolicy",
    "canonical_package_name",
    "parse_specifier",
    "select_bin_path",
]
