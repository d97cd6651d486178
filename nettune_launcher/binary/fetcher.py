"""
Download, verify and install nettune binaries into the cache.

Install workflow for one (version, platform) pair:
1. Create the version directory
2. Stream the binary into a staging file next to its final path
3. Verify the staging file against the release's checksums.txt, if any
4. Rename the staging file onto the final path (the only commit point)
5. chmod +x the installed binary

A failure anywhere before step 4 removes the staging file and leaves the
final path untouched, so the cache never exposes a partial or unverified
binary. Nothing is retried.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import requests

from nettune_launcher.core.config import LauncherConfig
from nettune_launcher.core.directory import ensure_directory
from nettune_launcher.core.download import (
    DownloadProgress,
    create_session,
    download_file,
)
from nettune_launcher.core.exceptions import (
    ChecksumMismatch,
    DownloadError,
    FileSystemError,
    NotFound,
)
from nettune_launcher.core.filesystem import atomic_rename, safe_unlink
from nettune_launcher.core.platform import PlatformInfo, artifact_name
from nettune_launcher.core.verification import compute_file_hash, digests_match

from .cache import CacheStore
from .releases import artifact_url, fetch_checksums

logger = logging.getLogger(__name__)


class ArtifactFetcher:
    """
    Populates the cache with verified nettune binaries.

    Example:
        >>> cache = CacheStore(config)
        >>> fetcher = ArtifactFetcher(config, cache)
        >>> path = fetcher.fetch("v0.3.1", detect_platform())
    """

    def __init__(
        self,
        config: LauncherConfig,
        cache: CacheStore,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.cache = cache
        self.session = session or create_session()

    def fetch(
        self,
        version: str,
        platform: PlatformInfo,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> Path:
        """
        Download and install the binary for a resolved version.

        Args:
            version: Concrete release tag (never "latest")
            platform: Target platform
            progress_callback: Optional callback for download progress

        Returns:
            Path to the installed, executable binary

        Raises:
            NotFound: If the release has no binary for this platform
            TransferError: On network failure
            ChecksumMismatch: If the download does not match checksums.txt
            FileSystemError: On directory, rename or permission failure
        """
        destination = self.cache.path_for(version, platform)
        ensure_directory(destination.parent)

        staging = self.cache.staging_file_for(destination)
        try:
            self._download(version, platform, staging, progress_callback)
            self._verify(version, platform, staging)
            atomic_rename(staging, destination)
        except Exception:
            safe_unlink(staging)
            raise

        self.cache.mark_executable(destination, platform)
        logger.debug(f"Installed {artifact_name(platform)} {version} at {destination}")
        return destination

    def _download(
        self,
        version: str,
        platform: PlatformInfo,
        staging: Path,
        progress_callback: Optional[Callable[[DownloadProgress], None]],
    ) -> None:
        url = artifact_url(self.config, version, platform)
        try:
            download_file(
                self.session,
                url,
                staging,
                progress_callback=progress_callback,
                timeout=self.config.timeout,
            )
        except NotFound as e:
            raise NotFound(
                url,
                f"Binary not found for {platform} version {version}",
                releases_url=self.config.releases_url,
            ) from e

    def _verify(self, version: str, platform: PlatformInfo, staging: Path) -> None:
        """
        Check the staging file against the release manifest.

        A missing manifest, or one without an entry for this binary, is not
        an error: verification is best-effort. A manifest entry that does not
        match is always fatal.
        """
        name = artifact_name(platform)
        try:
            checksums = fetch_checksums(self.config, version, self.session)
        except DownloadError as e:
            logger.info(f"No checksums available for {version}, skipping verification")
            logger.debug(f"Checksum manifest unavailable: {e}")
            return

        expected = checksums.get(name)
        if expected is None:
            logger.info(f"No checksum listed for {name}, skipping verification")
            return

        try:
            actual = compute_file_hash(staging)
        except OSError as e:
            raise FileSystemError(f"Failed to read {staging}: {e}") from e

        if not digests_match(actual, expected):
            raise ChecksumMismatch(name, expected=expected, actual=actual)

        logger.info("Checksum verified successfully")


__all__ = ["ArtifactFetcher"]
