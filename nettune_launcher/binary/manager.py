"""
Binary manager: make sure a launchable nettune binary is on disk.

Ties the release resolver, cache store and artifact fetcher together:

    resolve version -> look up cache -> (fetch if invalid) -> path
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import requests

from nettune_launcher.core.config import LauncherConfig
from nettune_launcher.core.download import DownloadProgress, create_session
from nettune_launcher.core.platform import PlatformInfo, detect_platform

from .cache import CacheStore
from .fetcher import ArtifactFetcher
from .releases import ReleaseResolver

logger = logging.getLogger(__name__)


class BinaryManager:
    """
    Handles resolving, downloading, caching and verifying the nettune binary.

    Example:
        >>> manager = BinaryManager(load_config())
        >>> binary = manager.ensure_binary()
        >>> print(f"Binary ready: {binary}")
    """

    def __init__(
        self,
        config: LauncherConfig,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.session = session or create_session()
        self.resolver = ReleaseResolver(config, self.session)
        self.cache = CacheStore(config, self.session)
        self.fetcher = ArtifactFetcher(config, self.cache, self.session)

    def ensure_binary(
        self,
        platform: Optional[PlatformInfo] = None,
        version: Optional[str] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> Path:
        """
        Ensure the binary exists and is ready to use.

        Args:
            platform: Target platform (default: detected host platform)
            version: Version request (default: config.version)
            progress_callback: Optional callback for download progress

        Returns:
            Path to an executable, verified binary

        Raises:
            UnsupportedPlatform: If the host platform has no binaries
            VersionResolutionError: If the version cannot be resolved
            NotFound, TransferError, ChecksumMismatch, FileSystemError:
                If a download was needed and failed
        """
        if platform is None:
            platform = detect_platform()

        tag = self.resolver.resolve(version or self.config.version)
        binary_path = self.cache.path_for(tag, platform)

        if self.cache.is_valid(binary_path, platform, tag):
            logger.info(f"Using cached binary: {binary_path}")
            return binary_path

        logger.info(f"Downloading nettune {tag} for {platform}...")
        binary_path = self.fetcher.fetch(tag, platform, progress_callback)

        logger.info(f"Binary ready: {binary_path}")
        return binary_path


__all__ = ["BinaryManager"]
