"""Tests for bin field selection (core/bin_entry.py)."""

from __future__ import annotations

from typing import Any

import pytest

from npm_global_exec.core.bin_entry import select_bin_path
from npm_global_exec.exceptions import NoBinEntryError


class TestStringBin:
    def test_string_is_used_as_is(self) -> None:
        assert select_bin_path("./cli.js", "anything") == "./cli.js"


class TestMappingBin:
    def test_prefers_entry_named_after_package(self) -> None:
        bin_field = {"foo": "./a.js", "bar": "./b.js"}
        assert select_bin_path(bin_field, "foo") == "./a.js"

    def test_named_entry_not_first(self) -> None:
        bin_field = {"bar": "./b.js", "foo": "./a.js"}
        assert select_bin_path(bin_field, "foo") == "./a.js"

    def test_falls_back_to_first_value(self) -> None:
        bin_field = {"foo": "./a.js", "bar": "./b.js"}
        assert select_bin_path(bin_field, "baz") == "./a.js"

    def test_scoped_name_uses_full_canonical_key(self) -> None:
        bin_field = {"other": "./o.js", "@scope/tool": "./t.js"}
        assert select_bin_path(bin_field, "@scope/tool") == "./t.js"

    def test_empty_named_entry_falls_back(self) -> None:
        bin_field = {"first": "./first.js", "foo": ""}
        assert select_bin_path(bin_field, "foo") == "./first.js"


class TestMissingBin:
    @pytest.mark.parametrize("bin_field", [None, "", "   ", {}, 42, ["./a.js"], {"foo": 1}])
    def test_unusable_field_raises(self, bin_field: Any) -> None:
        with pytest.raises(NoBinEntryError, match="No bin field found in foo"):
            select_bin_path(bin_field, "foo")

    def test_error_has_hint(self) -> None:
        with pytest.raises(NoBinEntryError) as exc_info:
            select_bin_path(None, "foo")
        assert exc_info.value.hint is not None
