"""
Helpers shared by tests: mocked release locations and fake binaries.
"""

import hashlib
from pathlib import Path

DOWNLOAD_URL = "https://github.test"
API_URL = "https://api.github.test"
REPO = "jtsang4/nettune"
RELEASES_ROOT = f"{DOWNLOAD_URL}/{REPO}/releases/download"
LATEST_URL = f"{API_URL}/repos/{REPO}/releases/latest"


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def checksums_body(entries: dict) -> str:
    """Render a checksums.txt body from {filename: content_bytes}."""
    return "".join(f"{sha256(data)}  {name}\n" for name, data in entries.items())


def write_executable(path: Path, content: bytes) -> Path:
    """Create a file marked executable for the current user."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    path.chmod(0o755)
    return path
