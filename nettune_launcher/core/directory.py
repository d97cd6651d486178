"""
Cache directory resolution for the nettune launcher.

Directory Structure:
    Cache root (~/.cache/nettune/, $XDG_CACHE_HOME/nettune/ or
    %LOCALAPPDATA%\\nettune\\):
        - <version>/                 : One directory per release tag
          - nettune-<os>-<arch>[.exe] : Installed binary
          - .nettune-<...>.<random>.tmp : In-flight (or orphaned) download
"""

import os
import sys
from pathlib import Path
from typing import Optional

from .exceptions import FileSystemError

CACHE_DIR_ENV = "NETTUNE_CACHE_DIR"
CACHE_DIR_NAME = "nettune"


def get_default_cache_dir(environ: Optional[dict] = None) -> Path:
    """
    Get the platform-specific cache directory for nettune binaries.

    Resolution order:
        1. $NETTUNE_CACHE_DIR
        2. Linux: $XDG_CACHE_HOME/nettune
        3. Windows: %LOCALAPPDATA%\\nettune
        4. ~/.cache/nettune

    Args:
        environ: Environment mapping to read (default: os.environ)

    Example:
        >>> get_default_cache_dir({"NETTUNE_CACHE_DIR": "/tmp/nt"})
        PosixPath('/tmp/nt')
    """
    if environ is None:
        environ = os.environ

    override = environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if sys.platform.startswith("linux"):
        xdg_cache = environ.get("XDG_CACHE_HOME")
        if xdg_cache:
            return Path(xdg_cache) / CACHE_DIR_NAME
    elif os.name == "nt":
        local_app_data = environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / CACHE_DIR_NAME

    return Path.home() / ".cache" / CACHE_DIR_NAME


def ensure_directory(path: Path) -> Path:
    """
    Create a directory and its parents (idempotent).

    Raises:
        FileSystemError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"Failed to create directory {path}: {e}") from e
    return path


__all__ = [
    "CACHE_DIR_ENV",
    "get_default_cache_dir",
    "ensure_directory",
]
