"""Tests for bin-entry resolution (infra/entry_resolver.py).

Packages are fabricated under a ``tmp_path`` workspace.
"""

from __future__ import annotations

import pytest

from npm_global_exec.core.models import PackageSpecifier
from npm_global_exec.core.specifier import parse_specifier
from npm_global_exec.exceptions import (
    BinFileNotFoundError,
    NoBinEntryError,
    PackageNotFoundError,
)
from npm_global_exec.infra.entry_resolver import load_package_manifest, resolve_entry
from npm_global_exec.infra.workspace import Workspace



class TestResolveEntry:
    def test_string_bin(self, workspace: Workspace, fake_package) -> None:  # noqa: ANN001
        tree = fake_package("cowsay", {"bin": "./cli.js"}, files=("cli.js",))

        path = resolve_entry(workspace, parse_specifier("cowsay@1.6.0"))

        assert path == tree / "cli.js"
        assert path.is_absolute()

    def test_mapping_prefers_package_name(
        self, workspace: Workspace, fake_package,  # noqa: ANN001
    ) -> None:
        tree = fake_package(
            "foo",
            {"bin": {"bar": "./b.js", "foo": "./a.js"}},
            files=("a.js", "b.js"),
        )
        assert resolve_entry(workspace, parse_specifier("foo")) == tree / "a.js"

    def test_mapping_falls_back_to_first_value(
        self, workspace: Workspace, fake_package,  # noqa: ANN001
    ) -> None:
        tree = fake_package(
            "baz",
            {"bin": {"foo": "./a.js", "bar": "./b.js"}},
            files=("a.js", "b.js"),
        )
        assert resolve_entry(workspace, parse_specifier("baz@2")) == tree / "a.js"

    def test_scoped_package(self, workspace: Workspace, fake_package) -> None:  # noqa: ANN001
        tree = fake_package(
            "@cloudbase/cloudbase-mcp",
            {"bin": {"cloudbase-mcp": "dist/cli.cjs"}},
            files=("dist/cli.cjs",),
        )
        path = resolve_entry(workspace, parse_specifier("@cloudbase/cloudbase-mcp@latest"))
        assert path == tree / "dist" / "cli.cjs"

    def test_missing_manifest(self, workspace: Workspace) -> None:
        with pytest.raises(PackageNotFoundError, match="Package ghost not found at"):
            resolve_entry(workspace, parse_specifier("ghost@1.0.0"))

    def test_missing_bin_field(self, workspace: Workspace, fake_package) -> None:  # noqa: ANN001
        fake_package("lib-only", {"main": "index.js"})
        with pytest.raises(NoBinEntryError, match="lib-only"):
            resolve_entry(workspace, parse_specifier("lib-only"))

    def test_bin_file_missing(self, workspace: Workspace, fake_package) -> None:  # noqa: ANN001
        fake_package("broken", {"bin": "./nowhere.js"})
        with pytest.raises(BinFileNotFoundError, match="nowhere.js"):
            resolve_entry(workspace, parse_specifier("broken"))

    def test_name_outside_node_modules(self, workspace: Workspace) -> None:
        outside = workspace.root.parent / "projects"
        outside.mkdir(parents=True)
        (outside / "package.json").write_text('{"bin": "./x.js"}', encoding="utf-8")
        (outside / "x.js").write_text("", encoding="utf-8")

        spec = PackageSpecifier(raw="../../projects", name="../../projects")
        with pytest.raises(PackageNotFoundError, match="outside"):
            resolve_entry(workspace, spec)


class TestLoadPackageManifest:
    def test_invalid_json(self, workspace: Workspace, fake_package) -> None:  # noqa: ANN001
        tree = fake_package("bad", {})
        (tree / "package.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(PackageNotFoundError, match="Cannot read manifest"):
            load_package_manifest(tree, "bad")

    def test_non_object_json(self, workspace: Workspace, fake_package) -> None:  # noqa: ANN001
        tree = fake_package("list", {})
        (tree / "package.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(PackageNotFoundError, match="not a JSON object"):
            load_package_manifest(tree, "list")

    def test_returns_dict(self, workspace: Workspace, fake_package) -> None:  # noqa: ANN001
        tree = fake_package("ok", {"name": "ok", "bin": "./x.js"})
        assert load_package_manifest(tree, "ok")["name"] == "ok"
