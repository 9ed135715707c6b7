"""npm-global-exec — install an npm package on demand and run its bin.

Packages land in a private per-user workspace so callers never need a
global install.
"""

from npm_global_exec.version import __version__

__all__: list[str] = ["__version__"]
