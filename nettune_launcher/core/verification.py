"""
SHA-256 verification and checksum manifest parsing.

Releases publish a single manifest (checksums.txt) in the sha256sum format:

    <hex-digest>  <filename>

This module parses that format and verifies files against it using
streaming hashes and constant-time comparison.
"""

import hashlib
import logging
import secrets
from pathlib import Path
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
SHA256_HEX_LENGTH = 64


def compute_file_hash(
    file_path: Path,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> str:
    """
    Compute the SHA-256 of a file, reading it in chunks.

    Args:
        file_path: Path to file
        progress_callback: Optional progress callback (bytes_read, total_bytes)

    Returns:
        Lowercase hex digest

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    hasher = hashlib.sha256()
    file_size = file_path.stat().st_size
    bytes_read = 0

    with open(file_path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            hasher.update(chunk)
            bytes_read += len(chunk)

            if progress_callback:
                progress_callback(bytes_read, file_size)

    return hasher.hexdigest()


def digests_match(actual: str, expected: str) -> bool:
    """Compare two hex digests case-insensitively in constant time."""
    return secrets.compare_digest(
        actual.strip().lower().encode("utf-8"),
        expected.strip().lower().encode("utf-8"),
    )


def parse_checksums(content: str, source: str = "checksums.txt") -> Dict[str, str]:
    """
    Parse a sha256sum-style manifest.

    Supports formats:
    - hash  filename
    - hash *filename (binary mode indicator)

    Blank lines, comments and lines without a well-formed SHA-256 are
    skipped.

    Args:
        content: Manifest text
        source: Name used in log messages

    Returns:
        Dict of filename -> lowercase hex digest

    Example:
        >>> parse_checksums("ABC...  nettune-linux-amd64\\n")
        {'nettune-linux-amd64': 'abc...'}
    """
    checksums = {}

    for line_num, line in enumerate(content.splitlines(), 1):
        line = line.strip()

        if not line or line.startswith("#"):
            continue

        parts = line.split(maxsplit=1)
        if len(parts) != 2:
            logger.debug(f"Skipping invalid line {line_num} in {source}: {line}")
            continue

        hash_value = parts[0].lower()
        filename = parts[1].strip()

        if filename.startswith("*"):
            filename = filename[1:].strip()

        if not _is_valid_sha256(hash_value):
            logger.debug(f"Skipping malformed digest at line {line_num} in {source}")
            continue

        checksums[filename] = hash_value

    return checksums


def _is_valid_sha256(hash_str: str) -> bool:
    if len(hash_str) != SHA256_HEX_LENGTH:
        return False
    return all(c in "0123456789abcdef" for c in hash_str)


__all__ = [
    "compute_file_hash",
    "digests_match",
    "parse_checksums",
]
