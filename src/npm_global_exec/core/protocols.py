"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import Protocol

from npm_global_exec.core.models import CleanupResult, InstallResult


class PackageManager(Protocol):
    """Contract for package-manager backends.

    Any object that implements :meth:`install` with the correct
    signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    def install(self, specifier: str) -> InstallResult:
        """Run one install of *specifier* and report its exit status.

        A non-zero exit is reported through the returned
        :class:`InstallResult`, never raised.

        Raises
        ------
        InstallSpawnError
            When the package-manager executable cannot be started.
        """
        ...  # pragma: no cover


class PackageTreeCleaner(Protocol):
    """Contract for removing a package's installed tree before a retry.

    Implementations are best effort: filesystem failures are reported
    in the returned :class:`CleanupResult` rather than raised.
    """

    def __call__(self, package_name: str) -> CleanupResult:
        ...  # pragma: no cover
