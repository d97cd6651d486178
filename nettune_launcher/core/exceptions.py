"""
Centralized exception hierarchy for the nettune launcher.

Every failure the launcher can surface to an operator derives from
LauncherError so the CLI can report it uniformly.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class LauncherError(Exception):
    """Base exception for all launcher errors."""

    pass


class ConfigError(LauncherError):
    """Configuration file or environment value is invalid."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnsupportedPlatform(LauncherError):
    """Raised when the host OS or architecture has no release mapping."""

    def __init__(self, os_name: str, arch: str, reason: str = ""):
        self.os_name = os_name
        self.arch = arch
        msg = f"Unsupported platform: {os_name}-{arch}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ============================================================================
# Release Exceptions
# ============================================================================


class VersionResolutionError(LauncherError):
    """Raised when a version request cannot be turned into a concrete tag."""

    pass


# ============================================================================
# Download Exceptions
# ============================================================================


class DownloadError(LauncherError):
    """Base exception for failures while fetching remote artifacts."""

    pass


class NotFound(DownloadError):
    """No artifact is published for the requested version and platform."""

    def __init__(self, url: str, message: str, releases_url: Optional[str] = None):
        self.url = url
        self.releases_url = releases_url
        if releases_url:
            message += f". Please check if the release exists at: {releases_url}"
        super().__init__(message)


class TransferError(DownloadError):
    """Network or transport failure while downloading."""

    pass


class ChecksumMismatch(LauncherError):
    """Downloaded bytes do not match the digest published in the manifest."""

    def __init__(self, filename: str, expected: str, actual: str):
        self.filename = filename
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch for {filename}: expected {expected}, got {actual}"
        )


# ============================================================================
# Local Exceptions
# ============================================================================


class FileSystemError(LauncherError):
    """Directory creation, rename, or permission failure."""

    pass


class SpawnError(LauncherError):
    """The downloaded executable could not be started."""

    pass


__all__ = [
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
