"""Tests for the package launcher (infra/launcher.py).

:func:`subprocess.run` is mocked — node never runs.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from npm_global_exec.exceptions import LaunchSpawnError
from npm_global_exec.infra.launcher import NodeLauncher, normalize_exit_code


class TestNormalizeExitCode:
    @pytest.mark.parametrize("code", [0, 1, 2, 42, 255])
    def test_plain_codes_pass_through(self, code: int) -> None:
        assert normalize_exit_code(code) == code

    def test_sigterm(self) -> None:
        assert normalize_exit_code(-15) == 143

    def test_sigkill(self) -> None:
        assert normalize_exit_code(-9) == 137


class TestNodeLauncher:
    def test_explicit_node(self) -> None:
        launcher = NodeLauncher("/opt/node/bin/node")
        assert launcher.build_command(Path("/ws/cli.js"), ["-x", "y"]) == [
            "/opt/node/bin/node",
            str(Path("/ws/cli.js")),
            "-x",
            "y",
        ]

    @patch("npm_global_exec.infra.launcher.shutil.which", return_value=None)
    def test_falls_back_to_plain_node(self, _mock_which: MagicMock) -> None:
        assert NodeLauncher().build_command(Path("/ws/cli.js"), [])[0] == "node"

    @patch("npm_global_exec.infra.launcher.subprocess.run")
    def test_streams_are_inherited(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0)
        NodeLauncher("node").launch(Path("/ws/cli.js"), ["--help"])

        args, kwargs = mock_run.call_args
        assert args[0] == ["node", str(Path("/ws/cli.js")), "--help"]
        for stream in ("stdin", "stdout", "stderr", "capture_output"):
            assert stream not in kwargs

    @pytest.mark.parametrize("code", [0, 3, 127])
    @patch("npm_global_exec.infra.launcher.subprocess.run")
    def test_returns_child_exit_code(self, mock_run: MagicMock, code: int) -> None:
        mock_run.return_value = MagicMock(returncode=code)
        assert NodeLauncher("node").launch(Path("/ws/cli.js")) == code

    @patch("npm_global_exec.infra.launcher.subprocess.run")
    def test_signal_termination_is_deterministic(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=-2)
        assert NodeLauncher("node").launch(Path("/ws/cli.js")) == 130

    @patch(
        "npm_global_exec.infra.launcher.subprocess.run",
        side_effect=FileNotFoundError(2, "No such file or directory", "node"),
    )
    def test_spawn_failure(self, _mock_run: MagicMock) -> None:
        with pytest.raises(LaunchSpawnError, match="Error executing") as exc_info:
            NodeLauncher("node").launch(Path("/ws/cli.js"))
        assert exc_info.value.hint is not None
