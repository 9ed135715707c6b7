"""Pure ``bin`` field selection for installed package manifests.

npm allows ``bin`` to be either a single path or a mapping of command
name to path::

    "bin": "./cli.js"
    "bin": {"foo": "./a.js", "bar": "./b.js"}

Selection rules
---------------
* A string is used as-is.
* A mapping prefers the entry keyed by the canonical package name,
  otherwise the first value in document order.
* Anything else (missing, empty, wrong type) has no usable entry.
"""

from __future__ import annotations

from typing import Any

from npm_global_exec.exceptions import NoBinEntryError


def select_bin_path(bin_field: Any, package_name: str) -> str:
    """Return the relative bin path declared by a manifest.

    Raises
    ------
    NoBinEntryError
        When *bin_field* does not yield a non-empty path string.
    """
    candidate: object = None
    if isinstance(bin_field, str):
        candidate = bin_field
    elif isinstance(bin_field, dict) and bin_field:
        # json.load keeps document order, so the first value is the
        # first entry as written in package.json.
        candidate = bin_field.get(package_name) or next(iter(bin_field.values()))

    if not isinstance(candidate, str) or not candidate.strip():
        raise NoBinEntryError(
            f"No bin field found in {package_name}",
            hint="The package does not declare an executable and cannot be run.",
        )
    return candidate
