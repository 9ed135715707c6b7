"""Shared pytest fixtures and configuration for the npm-global-exec test suite.

Guidelines
----------
* No network access and no real npm or node in any test.
* Subprocesses are mocked at the infra boundary.
* Core tests must be pure — no side effects.
* Workspaces live under ``tmp_path``, never in the real home directory.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from npm_global_exec.infra.workspace import HOME_ENV_VAR, REGISTRY_ENV_VAR, Workspace


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(HOME_ENV_VAR, raising=False)
    monkeypatch.delenv(REGISTRY_ENV_VAR, raising=False)


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    return Workspace(root=(tmp_path / "cloudbase-mcp").resolve())


def install_fake_package(
    workspace: Workspace,
    name: str,
    manifest: dict[str, object],
    files: tuple[str, ...] = (),
) -> Path:
    """Materialise ``node_modules/<name>`` with *manifest* and empty *files*."""
    package_dir = workspace.package_dir(name)
    package_dir.mkdir(parents=True, exist_ok=True)
    (package_dir / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    for relative in files:
        target = package_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("#!/usr/bin/env node\n", encoding="utf-8")
    return package_dir


@pytest.fixture
def fake_package(workspace: Workspace):  # noqa: ANN201
    """Factory fixture: ``fake_package(name, manifest, files)`` → package dir."""

    def _make(
        name: str,
        manifest: dict[str, object],
        files: tuple[str, ...] = (),
    ) -> Path:
        return install_fake_package(workspace, name, manifest, files)

    return _make
