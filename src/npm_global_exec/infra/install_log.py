"""Infrastructure: the append-only install log.

npm output is never shown live; instead every install event and every
line npm prints goes to ``npm-install.log`` in the workspace so failures
can be diagnosed afterwards.

The log is a :class:`logging.FileHandler` attached to the package
logger, so any module logging through ``logging.getLogger(__name__)``
lands in it while a run is active.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from npm_global_exec.exceptions import WorkspaceInitError

PACKAGE_LOGGER = "npm_global_exec"

# File output: timestamped, level padded to a fixed column
_FMT_FILE = "%(asctime)s %(levelname)-7s %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def open_install_log(log_path: Path, level: int = logging.DEBUG) -> logging.Handler:
    """Attach an append-mode file handler for *log_path* and return it.

    Raises
    ------
    WorkspaceInitError
        When the log file cannot be opened for appending.
    """
    try:
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as exc:
        raise WorkspaceInitError(
            f"Cannot open install log {log_path}: {exc}",
        ) from exc
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
    logging.getLogger(PACKAGE_LOGGER).addHandler(handler)
    return handler


def close_install_log(handler: logging.Handler) -> None:
    """Detach and close a handler returned by :func:`open_install_log`."""
    logging.getLogger(PACKAGE_LOGGER).removeHandler(handler)
    handler.close()


@contextmanager
def install_log(log_path: Path, level: int = logging.DEBUG) -> Iterator[logging.Handler]:
    """Keep the install log attached for the duration of the block.

    The package logger level is lowered to *level* while the block runs
    and restored afterwards.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    previous_level = package_logger.level
    handler = open_install_log(log_path, level)
    package_logger.setLevel(level)
    try:
        yield handler
    finally:
        package_logger.setLevel(previous_level)
        close_install_log(handler)
