"""
HTTP download helpers with streaming and progress tracking.

This module provides the network primitives the launcher uses:
- A shared requests.Session carrying the launcher's User-Agent
- Streaming file downloads with progress reporting (bytes, %, speed, ETA)
- Small text and JSON fetches (release index, checksum manifest)

Failures are mapped onto the launcher's error taxonomy:
- HTTP 404 -> NotFound
- Other HTTP errors, timeouts and connection failures -> TransferError
- Local write failures -> FileSystemError

Nothing here retries. Every request is attempted exactly once.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import requests
from requests.exceptions import HTTPError, RequestException

from .exceptions import FileSystemError, NotFound, TransferError

logger = logging.getLogger(__name__)

USER_AGENT = "nettune-launcher"
CHUNK_SIZE = 64 * 1024
DEFAULT_TIMEOUT = 30


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        return format_progress(self)


def create_session(user_agent: str = USER_AGENT) -> requests.Session:
    """Create an HTTP session that identifies the launcher."""
    session = requests.Session()
    session.headers["User-Agent"] = user_agent
    return session


def _raise_for_status(response: requests.Response, url: str) -> None:
    if response.status_code == 404:
        raise NotFound(url, f"Not found: {url}")
    try:
        response.raise_for_status()
    except HTTPError as e:
        raise TransferError(
            f"Request to {url} failed with HTTP {response.status_code}: "
            f"{response.reason}"
        ) from e


def download_file(
    session: requests.Session,
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Path:
    """
    Stream a URL into a local file.

    The destination is truncated and written chunk by chunk. On failure the
    partially written file is left behind for the caller to clean up.

    Args:
        session: HTTP session to use
        url: URL to download from
        destination: Local path to write
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        NotFound: If the server answers 404
        TransferError: For other HTTP errors and transport failures
        FileSystemError: If the destination cannot be written
    """
    destination = Path(destination)
    logger.debug(f"Downloading from {url}")

    try:
        with session.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            _raise_for_status(response, url)

            total_size = _content_length(response)

            downloaded = 0
            start_time = time.time()
            last_progress_time = start_time

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)

                    # Report at most twice per second, plus the final chunk
                    current_time = time.time()
                    if progress_callback and (
                        current_time - last_progress_time >= 0.5
                        or downloaded == total_size
                    ):
                        progress_callback(
                            _make_progress(
                                downloaded, total_size, current_time - start_time
                            )
                        )
                        last_progress_time = current_time
    except RequestException as e:
        raise TransferError(f"Download of {url} failed: {e}") from e
    except OSError as e:
        raise FileSystemError(f"Failed to write {destination}: {e}") from e

    logger.debug(f"Downloaded {downloaded} bytes to {destination}")
    return destination


def _content_length(response: requests.Response) -> int:
    """Declared body size, or 0 when the header is missing or malformed."""
    header = response.headers.get("content-length")
    if not header:
        return 0
    try:
        return max(int(header), 0)
    except ValueError:
        logger.debug(f"Ignoring invalid Content-Length header: {header!r}")
        return 0


def _make_progress(downloaded: int, total_size: int, elapsed: float) -> DownloadProgress:
    speed = downloaded / elapsed if elapsed > 0 else 0
    remaining = total_size - downloaded if total_size > 0 else 0
    eta = remaining / speed if speed > 0 else 0
    return DownloadProgress(
        bytes_downloaded=downloaded,
        total_bytes=total_size if total_size > 0 else downloaded,
        percentage=(downloaded / total_size * 100) if total_size > 0 else 0,
        speed_bps=speed,
        eta_seconds=eta,
    )


def fetch_text(
    session: requests.Session, url: str, timeout: float = DEFAULT_TIMEOUT
) -> str:
    """
    Fetch a small text document.

    Raises:
        NotFound: If the server answers 404
        TransferError: For other HTTP errors and transport failures
    """
    try:
        response = session.get(url, timeout=timeout, allow_redirects=True)
    except RequestException as e:
        raise TransferError(f"Request to {url} failed: {e}") from e

    _raise_for_status(response, url)
    return response.text


def fetch_json(
    session: requests.Session,
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Optional[dict] = None,
) -> Any:
    """
    Fetch and decode a JSON document.

    Raises:
        NotFound: If the server answers 404
        TransferError: For other HTTP errors, transport failures and
            bodies that are not valid JSON
    """
    try:
        response = session.get(url, timeout=timeout, headers=headers)
    except RequestException as e:
        raise TransferError(f"Request to {url} failed: {e}") from e

    _raise_for_status(response, url)

    try:
        return response.json()
    except ValueError as e:
        raise TransferError(f"Invalid JSON from {url}: {e}") from e


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(5242880, 10485760, 50.0, 1048576, 5)
        >>> print(format_progress(progress))
        5.0/10.0 MB (50.0%) at 1.0 MB/s ETA: 5s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = [
    "USER_AGENT",
    "DownloadProgress",
    "create_session",
    "download_file",
    "fetch_text",
    "fetch_json",
    "format_progress",
]
