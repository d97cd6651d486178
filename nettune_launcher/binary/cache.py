"""
Local cache of downloaded nettune binaries.

Each (version, platform) pair maps to exactly one path:

    <cache_dir>/<version>/nettune-<os>-<arch>[.exe]

Paths are never shared between versions, so installing a new release never
overwrites a binary that another launcher may be running.
"""

import logging
import time
from pathlib import Path
from typing import List, Optional

import requests

from nettune_launcher.core.config import LauncherConfig
from nettune_launcher.core.download import create_session
from nettune_launcher.core.exceptions import DownloadError
from nettune_launcher.core.filesystem import (
    create_staging_file,
    is_executable,
    make_executable,
    safe_unlink,
)
from nettune_launcher.core.platform import PlatformInfo, artifact_name
from nettune_launcher.core.verification import compute_file_hash, digests_match

from .releases import fetch_checksums, validate_version_tag

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


class CacheStore:
    """
    Maps release versions to cached binaries and checks their validity.

    Attributes:
        config: Launcher configuration (cache_dir, release locations)
        cache_dir: Root of the versioned cache tree
    """

    def __init__(
        self, config: LauncherConfig, session: Optional[requests.Session] = None
    ):
        self.config = config
        self.cache_dir = Path(config.cache_dir)
        self.session = session or create_session()

    def path_for(self, version: str, platform: PlatformInfo) -> Path:
        """
        Get the cache path of a binary. Pure: performs no I/O.

        Raises:
            VersionResolutionError: If version is not a concrete, path-safe tag
        """
        validate_version_tag(version)
        return self.cache_dir / version / artifact_name(platform)

    def staging_file_for(self, path: Path) -> Path:
        """
        Create a fresh staging file next to `path` for a download.

        Every call gets its own name, so concurrent launchers never write
        into the same file.

        Raises:
            FileSystemError: If the file cannot be created
        """
        return create_staging_file(path, suffix=TEMP_SUFFIX)

    def is_valid(self, path: Path, platform: PlatformInfo, version: str) -> bool:
        """
        Check whether a cached binary can be launched.

        A binary is valid when it exists and is executable. If the release
        manifest can be fetched and lists this binary, its SHA-256 must also
        match. When the manifest cannot be obtained the existing binary is
        trusted: it was verified when it was installed.
        """
        path = Path(path)
        if not is_executable(path, windows=platform.is_windows):
            logger.debug(f"No executable binary at {path}")
            return False

        name = artifact_name(platform)
        try:
            checksums = fetch_checksums(self.config, version, self.session)
        except DownloadError as e:
            logger.warning(
                f"Warning: Could not verify checksum, using cached binary ({e})"
            )
            return True

        expected = checksums.get(name)
        if expected is None:
            logger.warning(
                f"Warning: No checksum for {name} in release {version}, "
                "using cached binary"
            )
            return True

        try:
            actual = compute_file_hash(path)
        except OSError as e:
            logger.warning(f"Could not read cached binary {path}: {e}")
            return False

        if not digests_match(actual, expected):
            logger.warning(
                f"Cached binary {path} does not match release checksum "
                f"(expected {expected}, got {actual})"
            )
            return False

        logger.debug(f"Checksum verified for cached binary {path}")
        return True

    def mark_executable(self, path: Path, platform: Optional[PlatformInfo] = None):
        """
        chmod +x an installed binary. No-op for Windows targets.

        Raises:
            FileSystemError: If permissions cannot be changed
        """
        windows = platform.is_windows if platform is not None else None
        make_executable(path, windows=windows)

    def find_orphaned_temp_files(
        self, max_age_hours: Optional[float] = None
    ) -> List[Path]:
        """
        List staging files left behind by interrupted downloads.

        Args:
            max_age_hours: Only report files last modified longer ago than
                this, so downloads still in flight are left alone
        """
        if not self.cache_dir.is_dir():
            return []

        now = time.time()
        orphans = []
        for temp_file in self.cache_dir.glob(f"*/*{TEMP_SUFFIX}"):
            try:
                if not temp_file.is_file():
                    continue
                age_hours = (now - temp_file.stat().st_mtime) / 3600
            except OSError:
                continue
            if max_age_hours is None or age_hours > max_age_hours:
                orphans.append(temp_file)
        return sorted(orphans)

    def remove_orphaned_temp_files(self, max_age_hours: Optional[float] = None) -> int:
        """
        Delete staging files left behind by interrupted downloads.

        Installed binaries are never touched.

        Returns:
            Number of files removed
        """
        removed = 0
        for temp_file in self.find_orphaned_temp_files(max_age_hours):
            if safe_unlink(temp_file):
                logger.info(f"Removed orphaned download: {temp_file}")
                removed += 1
        return removed


__all__ = ["CacheStore", "TEMP_SUFFIX"]
