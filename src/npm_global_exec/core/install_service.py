"""Core install service — drives ``npm install`` with bounded retries.

The actual subprocess work is delegated to a
:class:`~npm_global_exec.core.protocols.PackageManager` injected at
construction time.  This service is responsible for:

* Recording every attempt, retry and outcome in the install log.
* Classifying failures through a :class:`RetryPolicy`.
* Removing the package tree and backing off before a retry.
* Ensuring only :class:`~npm_global_exec.exceptions.NpmGlobalExecError`
  subclasses escape.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from npm_global_exec.core.models import (
    CleanupResult,
    InstallOutcome,
    InstallResult,
    PackageSpecifier,
    RetryPolicy,
)
from npm_global_exec.core.protocols import PackageManager, PackageTreeCleaner
from npm_global_exec.exceptions import (
    InstallFailedError,
    InstallSpawnError,
    NpmGlobalExecError,
    append_install_log_hint,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[dict[str, Any]], None]

# npm lines quoted in the failure hint.
OUTPUT_TAIL_LINES = 5


class InstallService:
    """Install a package, retrying only on transient npm failures.

    Parameters
    ----------
    manager:
        Any object satisfying the :class:`PackageManager` protocol.
    cleaner:
        Callable removing ``node_modules/<name>`` before a retry.
    policy:
        Retry rule; defaults to three retries on exit code 190.
    sleep:
        Backoff function; :func:`time.sleep` when omitted.
    log_path:
        Install log location, quoted in failure hints.
    """

    def __init__(
        self,
        manager: PackageManager,
        cleaner: PackageTreeCleaner,
        *,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] | None = None,
        log_path: Path | None = None,
    ) -> None:
        self._manager: PackageManager = manager
        self._cleaner: PackageTreeCleaner = cleaner
        self._policy: RetryPolicy = policy or RetryPolicy()
        self._sleep: Callable[[float], None] = sleep or time.sleep
        self._log_path = log_path

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def install(
        self,
        specifier: PackageSpecifier,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> InstallOutcome:
        """Install *specifier* into the workspace.

        Raises
        ------
        InstallSpawnError
            When npm cannot be started.  Never retried.
        InstallFailedError
            On a non-transient failure, or once retries are exhausted.
        """
        notify = progress_callback or _ignore
        cleanups: list[CleanupResult] = []
        retry_count = 0

        while True:
            if retry_count:
                logger.info("Installing %s (retry %d)", specifier.raw, retry_count)
            else:
                logger.info("Installing %s", specifier.raw)
            notify({"status": "installing", "specifier": specifier.raw, "retry": retry_count})

            result = self._run(specifier)

            if result.ok:
                logger.info("Successfully installed %s", specifier.raw)
                notify({"status": "finished", "specifier": specifier.raw})
                return InstallOutcome(
                    specifier=specifier,
                    attempts=retry_count + 1,
                    cleanups=tuple(cleanups),
                )

            if not self._policy.should_retry(result.exit_code, retry_count):
                raise self._failure(specifier, result, retry_count)

            delay = self._policy.delay_for(retry_count)
            logger.warning(
                "Install of %s failed with transient exit code %d; "
                "retrying in %.1fs (%d/%d)",
                specifier.raw,
                result.exit_code,
                delay,
                retry_count + 1,
                self._policy.max_retries,
            )
            cleanups.append(self._cleanup(specifier))
            notify({
                "status": "retrying",
                "specifier": specifier.raw,
                "exit_code": result.exit_code,
                "delay": delay,
                "retry": retry_count + 1,
            })
            self._sleep(delay)
            retry_count += 1

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(self, specifier: PackageSpecifier) -> InstallResult:
        """Call the manager and ensure only our exceptions escape."""
        try:
            return self._manager.install(specifier.raw)
        except NpmGlobalExecError:
            raise
        except Exception as exc:
            logger.error("Could not run package manager: %s", exc)
            raise InstallSpawnError(
                f"Unexpected package manager error: {exc}",
            ) from exc

    def _cleanup(self, specifier: PackageSpecifier) -> CleanupResult:
        cleanup = self._cleaner(specifier.name)
        if cleanup.error is not None:
            logger.warning(
                "Could not remove %s before retry: %s", cleanup.path, cleanup.error,
            )
        elif cleanup.existed:
            logger.info("Removed %s before retry", cleanup.path)
        return cleanup

    def _failure(
        self,
        specifier: PackageSpecifier,
        result: InstallResult,
        retry_count: int,
    ) -> InstallFailedError:
        exit_code = result.exit_code
        if retry_count:
            logger.error(
                "Failed to install %s (exit code: %d) after %d retries",
                specifier.raw,
                exit_code,
                retry_count,
            )
        else:
            logger.error("Failed to install %s (exit code: %d)", specifier.raw, exit_code)

        hint = "Check the package name and your network connection."
        tail = [line for line in result.output if line.strip()][-OUTPUT_TAIL_LINES:]
        if tail:
            hint = "\n".join(("Last npm output:", *(f"  {line}" for line in tail), hint))
        if self._log_path is not None:
            hint = append_install_log_hint(hint, self._log_path)
        return InstallFailedError(
            f"Failed to install {specifier.raw} (exit code: {exit_code})",
            exit_code=exit_code,
            retries=retry_count,
            hint=hint,
        )


def _ignore(_event: dict[str, Any]) -> None:
    return None
