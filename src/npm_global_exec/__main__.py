"""Allow ``python -m npm_global_exec`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m npm_global_exec`` behaves identically to the
``npm-global-exec`` console script.
"""

from __future__ import annotations

from npm_global_exec.cli.app import cli

if __name__ == "__main__":
    cli()
