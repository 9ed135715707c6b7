"""Domain models for npm-global-exec.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and small derived values.  They carry zero
I/O and no dependencies on external packages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


# ---------------------------------------------------------------------------
# Package specifier
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PackageSpecifier:
    """A caller-supplied package identity and its canonical name."""

    raw: str
    """Specifier exactly as given (e.g. ``@scope/name@1.2.3``)."""

    name: str
    """Canonical package name with any version suffix removed."""


# ---------------------------------------------------------------------------
# Install attempts
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InstallResult:
    """Outcome of a single ``npm install`` subprocess run."""

    exit_code: int
    output: tuple[str, ...] = ()
    """Captured stdout/stderr lines, in order of arrival; the tail is quoted on failure."""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True, slots=True)
class CleanupResult:
    """Result of the best-effort package-tree removal on the retry path.

    Attributes
    ----------
    path : Path
        Directory that was targeted.
    existed : bool
        Whether the directory was present before removal.
    removed : bool
        Whether the directory is gone afterwards.
    error : str | None
        Error text when removal failed, otherwise ``None``.
    """

    path: Path
    existed: bool
    removed: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class InstallOutcome:
    """Summary of a successful install, including any retries taken."""

    specifier: PackageSpecifier
    attempts: int
    cleanups: tuple[CleanupResult, ...] = ()

    @property
    def retries(self) -> int:
        return self.attempts - 1


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded linear-backoff retry rule for transient install failures.

    Only ``transient_exit_codes`` are retried.  npm exits with 190 when
    the target directory is not empty, which a fresh attempt after
    removing the package tree usually fixes.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    """Seconds; the n-th retry waits ``base_delay * n``."""
    transient_exit_codes: frozenset[int] = field(
        default_factory=lambda: frozenset({190}),
    )

    def is_transient(self, exit_code: int) -> bool:
        return exit_code in self.transient_exit_codes

    def should_retry(self, exit_code: int, retry_count: int) -> bool:
        """Return ``True`` when another attempt is allowed."""
        return self.is_transient(exit_code) and retry_count < self.max_retries

    def delay_for(self, retry_count: int) -> float:
        """Seconds to wait before the attempt following *retry_count*."""
        return self.base_delay * (retry_count + 1)
