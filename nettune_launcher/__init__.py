"""
nettune-launcher: fetch, verify and run the nettune client binary.

The launcher makes sure a versioned, checksum-verified nettune binary for
the host platform is in the local cache, then runs `nettune client` with
stdio and shutdown signals passed straight through.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("nettune-launcher")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = ["__version__"]
