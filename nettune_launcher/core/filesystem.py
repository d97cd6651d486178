"""
File system utilities for the nettune launcher.

This module provides the small set of platform-aware file operations the
install pipeline depends on:
- Execute permission checks and chmod +x (no-op on Windows)
- Uniquely named staging files next to their destination
- Atomic rename of a staged file onto its final path
- Best-effort deletion of staged files
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

# rwxr-xr-x on top of whatever the file already allows
_EXECUTABLE_MODE = (
    stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
)


def is_executable(path: Union[str, Path], windows: Optional[bool] = None) -> bool:
    """
    Check that a path is a regular file the current user may execute.

    On Windows execute bits are not meaningful, so any regular file counts.

    Args:
        path: File to check
        windows: Treat as a Windows target (default: host platform)
    """
    if windows is None:
        windows = IS_WINDOWS

    path = Path(path)
    if not path.is_file():
        return False
    if windows:
        return True
    return os.access(path, os.X_OK)


def make_executable(path: Union[str, Path], windows: Optional[bool] = None) -> None:
    """
    Make a file readable and executable by everyone (chmod 755).

    Args:
        path: File to mark executable
        windows: Treat as a Windows target (default: host platform)

    Raises:
        FileSystemError: If permissions cannot be changed
    """
    if windows is None:
        windows = IS_WINDOWS
    if windows:
        return

    path = Path(path)
    try:
        mode = path.stat().st_mode
        path.chmod(stat.S_IMODE(mode) | _EXECUTABLE_MODE)
    except OSError as e:
        raise FileSystemError(f"Failed to make {path} executable: {e}") from e


def create_staging_file(destination: Union[str, Path], suffix: str = ".tmp") -> Path:
    """
    Create an empty, uniquely named file next to `destination`.

    The file lives in the same directory so a later atomic_rename() stays on
    one volume. Names look like `.<destination-name>.<random><suffix>`.

    Raises:
        FileSystemError: If the file cannot be created
    """
    destination = Path(destination)
    try:
        fd, temp_path_str = tempfile.mkstemp(
            dir=destination.parent, prefix=f".{destination.name}.", suffix=suffix
        )
    except OSError as e:
        raise FileSystemError(
            f"Failed to create staging file in {destination.parent}: {e}"
        ) from e
    os.close(fd)
    return Path(temp_path_str)


def atomic_rename(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Move a staged file onto its final path in one atomic step.

    Source and destination must live on the same volume (same directory is
    safest). An existing destination is replaced.

    Raises:
        FileSystemError: If the rename fails
    """
    source = Path(source)
    destination = Path(destination)
    try:
        os.replace(source, destination)
    except OSError as e:
        raise FileSystemError(
            f"Failed to move {source.name} into place at {destination}: {e}"
        ) from e
    return destination


def safe_unlink(path: Union[str, Path]) -> bool:
    """
    Delete a file, ignoring every error.

    Returns:
        True if the file was removed, False if it was missing or undeletable
    """
    path = Path(path)
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.debug(f"Could not remove {path}: {e}")
        return False


__all__ = [
    "IS_WINDOWS",
    "is_executable",
    "make_executable",
    "create_staging_file",
    "atomic_rename",
    "safe_unlink",
]
