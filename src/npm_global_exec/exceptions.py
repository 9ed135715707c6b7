"""Custom exception hierarchy for npm-global-exec.

All exceptions that cross layer boundaries must inherit from
:class:`NpmGlobalExecError`.  Raw ``OSError``/``JSONDecodeError`` values
raised by the filesystem or by :mod:`subprocess` must NEVER propagate
beyond the infrastructure layer — they are caught there and re-raised as
a typed subclass defined here.

Hierarchy
---------
NpmGlobalExecError
├── UsageError
├── WorkspaceInitError
├── InstallSpawnError
├── InstallFailedError
├── PackageNotFoundError
├── NoBinEntryError
├── BinFileNotFoundError
├── LaunchSpawnError
└── EnvironmentError
"""

from __future__ import annotations


class NpmGlobalExecError(Exception):
    """Base exception for all npm-global-exec errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Invocation ------------------------------------------------------------

class UsageError(NpmGlobalExecError):
    """Raised when no package specifier was given on the command line."""


# --- Workspace -------------------------------------------------------------

class WorkspaceInitError(NpmGlobalExecError):
    """Raised when the workspace directory or its seed files cannot be created."""


# --- Install ---------------------------------------------------------------

class InstallSpawnError(NpmGlobalExecError):
    """Raised when the npm executable cannot be started at all."""


class InstallFailedError(NpmGlobalExecError):
    """Raised when ``npm install`` exits non-zero and will not be retried."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int,
        retries: int = 0,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.exit_code: int = exit_code
        self.retries: int = retries


# --- Entry resolution ------------------------------------------------------

class PackageNotFoundError(NpmGlobalExecError):
    """Raised when the installed package manifest is missing or unreadable."""


class NoBinEntryError(NpmGlobalExecError):
    """Raised when the package manifest declares no usable ``bin`` entry."""


class BinFileNotFoundError(NpmGlobalExecError):
    """Raised when the declared bin file does not exist on disk."""


# --- Launch ----------------------------------------------------------------

class LaunchSpawnError(NpmGlobalExecError):
    """Raised when the resolved bin entry cannot be started."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(NpmGlobalExecError):
    """Raised when a required runtime dependency is not available."""


def append_install_log_hint(hint: str, log_path: object) -> str:
    """Append a pointer to the install log to an existing hint text.

    The pointer is appended only once and preserves the original hint
    content verbatim.
    """
    marker = "Full npm output:"
    if marker in hint:
        return hint
    return "\n".join((hint, f"{marker} {log_path}"))
