"""
Core functionality for the nettune launcher.

This package contains the foundational modules that the binary manager and
process launcher depend on.
"""

from .config import (
    LauncherConfig,
    load_config,
)

from .directory import (
    get_default_cache_dir,
    ensure_directory,
)

from .platform import (
    PlatformInfo,
    artifact_name,
    detect_platform,
    is_supported_platform,
    get_supported_platforms,
    clear_platform_cache,
)

from .exceptions import (
    LauncherError,
    ConfigError,
    UnsupportedPlatform,
    VersionResolutionError,
    DownloadError,
    NotFound,
    TransferError,
    ChecksumMismatch,
    FileSystemError,
    SpawnError,
)

__all__ = [
    "LauncherConfig",
    "load_config",
    "get_default_cache_dir",
    "ensure_directory",
    "PlatformInfo",
    "artifact_name",
    "detect_platform",
    "is_supported_platform",
    "get_supported_platforms",
    "clear_platform_cache",
    "LauncherError",
    "ConfigError",
    "UnsupportedPlatform",
    "VersionResolutionError",
    "DownloadError",
    "NotFound",
    "TransferError",
    "ChecksumMismatch",
    "FileSystemError",
    "SpawnError",
]
