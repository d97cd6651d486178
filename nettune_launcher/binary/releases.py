"""
Release resolution and release asset locations.

A version request is either the literal "latest" or a concrete tag such as
"v0.3.1". Concrete tags are trusted as-is and never touch the network;
"latest" is resolved through the GitHub releases API.

Asset locations follow the GitHub release layout:

    <download_url>/<owner>/<repo>/releases/download/<tag>/<artifact>
    <download_url>/<owner>/<repo>/releases/download/<tag>/checksums.txt
"""

import logging
from typing import Dict, Optional

import requests

from nettune_launcher.core.config import LauncherConfig
from nettune_launcher.core.download import create_session, fetch_json, fetch_text
from nettune_launcher.core.exceptions import (
    DownloadError,
    VersionResolutionError,
)
from nettune_launcher.core.platform import (
    CHECKSUMS_FILE_NAME,
    PlatformInfo,
    artifact_name,
)
from nettune_launcher.core.verification import parse_checksums

logger = logging.getLogger(__name__)

LATEST = "latest"

GITHUB_API_HEADERS = {"Accept": "application/vnd.github.v3+json"}


def validate_version_tag(tag: str) -> str:
    """
    Ensure a tag can be used as a single cache path component.

    Raises:
        VersionResolutionError: If the tag is empty, "latest", or could
            escape its cache directory
    """
    if not isinstance(tag, str) or not tag.strip():
        raise VersionResolutionError("Version tag cannot be empty")
    if tag == LATEST:
        raise VersionResolutionError('"latest" must be resolved to a concrete tag')
    if tag in (".", "..") or "/" in tag or "\\" in tag or "\0" in tag:
        raise VersionResolutionError(f"Invalid version tag: {tag!r}")
    return tag


def artifact_url(config: LauncherConfig, version: str, platform: PlatformInfo) -> str:
    """Download URL of the binary for one (version, platform) pair."""
    return f"{config.releases_download_root}/{version}/{artifact_name(platform)}"


def checksums_url(config: LauncherConfig, version: str) -> str:
    """Download URL of the checksum manifest shared by a release."""
    return f"{config.releases_download_root}/{version}/{CHECKSUMS_FILE_NAME}"


def fetch_checksums(
    config: LauncherConfig, version: str, session: requests.Session
) -> Dict[str, str]:
    """
    Download and parse the checksum manifest of a release.

    Returns:
        Dict of filename -> lowercase hex SHA-256

    Raises:
        NotFound: If the release publishes no manifest
        TransferError: On network failure
    """
    url = checksums_url(config, version)
    logger.debug(f"Fetching checksums from {url}")
    content = fetch_text(session, url, timeout=config.timeout)
    return parse_checksums(content, source=url)


class ReleaseResolver:
    """
    Turns a version request into a concrete, immutable release tag.

    Example:
        >>> resolver = ReleaseResolver(config)
        >>> resolver.resolve("v0.3.1")   # no network access
        'v0.3.1'
        >>> resolver.resolve("latest")   # queries the releases API
        'v0.4.0'
    """

    def __init__(
        self, config: LauncherConfig, session: Optional[requests.Session] = None
    ):
        self.config = config
        self.session = session or create_session()

    def resolve(self, requested: str) -> str:
        """
        Resolve a version request.

        Raises:
            VersionResolutionError: If "latest" cannot be resolved, or the
                requested tag is not usable
        """
        if requested != LATEST:
            return validate_version_tag(requested)

        url = self.config.latest_release_url
        logger.debug(f"Resolving latest release from {url}")

        try:
            release = fetch_json(
                self.session, url, timeout=self.config.timeout, headers=GITHUB_API_HEADERS
            )
        except DownloadError as e:
            raise VersionResolutionError(
                f"Failed to resolve latest version of {self.config.github_repo}: {e}"
            ) from e

        tag = release.get("tag_name") if isinstance(release, dict) else None
        if not isinstance(tag, str) or not tag.strip():
            raise VersionResolutionError(
                f"Release index at {url} did not report a tag_name"
            )

        tag = validate_version_tag(tag.strip())
        logger.debug(f"Latest release of {self.config.github_repo} is {tag}")
        return tag


__all__ = [
    "LATEST",
    "ReleaseResolver",
    "validate_version_tag",
    "artifact_url",
    "checksums_url",
    "fetch_checksums",
]
