"""Pure package-specifier parsing.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic.

Accepted forms::

    name              cowsay
    name@version      cowsay@1.6.0
    @scope/name       @cloudbase/cloudbase-mcp
    @scope/name@tag   @cloudbase/cloudbase-mcp@latest
"""

from __future__ import annotations

from npm_global_exec.core.models import PackageSpecifier
from npm_global_exec.exceptions import UsageError

_FORMS_HINT = "Use name, name@version, @scope/name or @scope/name@version."


def canonical_package_name(specifier: str) -> str:
    """Strip a trailing ``@version`` from *specifier*, keeping any scope.

    Scoped specifiers split on the **last** ``@`` (index 0 is the scope
    marker and never counts); unscoped ones split on the first.
    """
    if specifier.startswith("@"):
        last_at = specifier.rfind("@")
        if last_at > 0:
            return specifier[:last_at]
        return specifier
    return specifier.split("@", 1)[0]


def is_path_like(name: str) -> bool:
    """Whether *name* reads as a filesystem path rather than a package name.

    npm installs such specifiers from a local folder, and their canonical
    name would point outside ``node_modules``.
    """
    normalized = name.replace("\\", "/")
    if normalized.startswith(("/", ".")):
        return True
    return any(part in (".", "..") for part in normalized.split("/"))


def parse_specifier(specifier: str) -> PackageSpecifier:
    """Build a :class:`PackageSpecifier` from raw command-line text.

    Raises
    ------
    UsageError
        If *specifier* is empty or blank, or names a local path.
    """
    if not specifier.strip():
        raise UsageError(
            "A package specifier is required.",
            hint=_FORMS_HINT,
        )
    name = canonical_package_name(specifier)
    if is_path_like(name):
        raise UsageError(
            f"{specifier!r} is a path, not a package name.",
            hint=_FORMS_HINT,
        )
    return PackageSpecifier(raw=specifier, name=name)
