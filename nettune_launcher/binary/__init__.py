"""
Acquisition of the nettune binary.

This package resolves release versions, manages the local binary cache and
downloads, verifies and installs release binaries.
"""

from .releases import (
    LATEST,
    ReleaseResolver,
    artifact_url,
    checksums_url,
    fetch_checksums,
    validate_version_tag,
)

from .cache import CacheStore

from .fetcher import ArtifactFetcher

from .manager import BinaryManager

__all__ = [
    "LATEST",
    "ReleaseResolver",
    "artifact_url",
    "checksums_url",
    "fetch_checksums",
    "validate_version_tag",
    "CacheStore",
    "ArtifactFetcher",
    "BinaryManager",
]
