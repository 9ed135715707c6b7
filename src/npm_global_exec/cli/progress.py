"""Rich spinner driven by install-service progress events.

npm output goes to the install log, so the operator would otherwise see
nothing while an install runs.  :class:`InstallStatus` bridges the
:class:`~npm_global_exec.core.install_service.InstallService` progress
callback to a Rich :class:`~rich.status.Status` spinner on stderr.

Design
------
* :meth:`__call__` is the callback passed to the install service.
* Shutdown-safe: events arriving after :meth:`stop` are ignored.
* Without Rich the hook degrades to one plain stderr line per event.
"""

from __future__ import annotations

from typing import Any

from npm_global_exec.cli.console import console, get_rich_console


class InstallStatus:
    """Callable progress-hook adapter for Rich.

    Usage::

        with InstallStatus("cowsay") as hook:
            service.install(spec, progress_callback=hook)
    """

    def __init__(self, specifier: str) -> None:
        self._specifier: str = specifier
        self._status: Any = None
        try:
            from rich.status import Status
        except ModuleNotFoundError:
            pass
        else:
            self._status = Status(
                self._message(0),
                console=get_rich_console(),
                spinner="dots",
            )
        self._started: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> InstallStatus:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if not self._started:
            if self._status is not None:
                self._status.start()
            self._started = True

    def stop(self) -> None:
        """Stop the spinner (idempotent)."""
        if self._started:
            if self._status is not None:
                self._status.stop()
            self._started = False

    # ------------------------------------------------------------------
    # Hook callback
    # ------------------------------------------------------------------

    def __call__(self, event: dict[str, Any]) -> None:
        """Install-service progress callback.

        Parameters
        ----------
        event:
            A dict with at least a ``"status"`` key: ``"installing"``,
            ``"retrying"`` or ``"finished"``.
        """
        if not self._started:
            return

        status: str = event.get("status", "")
        if status == "installing":
            self._update(self._message(int(event.get("retry", 0))))
        elif status == "retrying":
            delay = float(event.get("delay", 0.0))
            self._update(
                f"[yellow]npm exited with {event.get('exit_code')}; "
                f"retrying {self._specifier} in {delay:.0f}s…[/yellow]"
            )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _message(self, retry: int) -> str:
        suffix = f" (retry {retry})" if retry else ""
        return f"[bold]Installing {self._specifier}{suffix}…[/bold]"

    def _update(self, message: str) -> None:
        if self._status is not None:
            self._status.update(message)
        else:
            console.print(message)
