"""
Platform detection for the nettune launcher.

This module maps the host operating system and CPU architecture to the
internal platform tags used by the launcher, and maps those tags to the
file names published in nettune releases.

Internal tags and release names are kept separate on purpose:
- Internal OS tags: 'darwin', 'linux', 'windows'
- Internal arch tags: 'x64', 'arm64'
- Release names follow Go conventions: 'amd64' for x64, '.exe' on Windows

Usage:
    from nettune_launcher.core.platform import detect_platform, artifact_name

    info = detect_platform()
    print(info.platform_string())   # linux-x64
    print(artifact_name(info))      # nettune-linux-amd64
"""

import functools
import platform
from dataclasses import dataclass

from .exceptions import UnsupportedPlatform

PRODUCT_NAME = "nettune"
CHECKSUMS_FILE_NAME = "checksums.txt"

SUPPORTED_OS = ("darwin", "linux", "windows")
SUPPORTED_ARCH = ("x64", "arm64")

# Host OS names (platform.system().lower()) -> internal OS tag
_OS_MAP = {
    "darwin": "darwin",
    "linux": "linux",
    "windows": "windows",
    "win32": "windows",
}

# Host machine names (platform.machine().lower()) -> internal arch tag
_ARCH_MAP = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
}

# Internal tag -> name used in release file names
_RELEASE_OS_NAMES = {"darwin": "darwin", "linux": "linux", "windows": "windows"}
_RELEASE_ARCH_NAMES = {"x64": "amd64", "arm64": "arm64"}


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform as seen by the launcher.

    Attributes:
        os: Operating system tag ('darwin', 'linux', 'windows')
        arch: CPU architecture tag ('x64', 'arm64')
    """

    os: str
    arch: str

    def __post_init__(self):
        if self.os not in SUPPORTED_OS:
            raise UnsupportedPlatform(
                self.os, self.arch, f"supported OS: {', '.join(SUPPORTED_OS)}"
            )
        if self.arch not in SUPPORTED_ARCH:
            raise UnsupportedPlatform(
                self.os, self.arch, f"supported arch: {', '.join(SUPPORTED_ARCH)}"
            )

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'darwin-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        return self.platform_string()


def artifact_name(info: PlatformInfo) -> str:
    """
    Get the release file name of the nettune binary for a platform.

    Format: nettune-{os}-{arch}[.exe]

    Example:
        >>> artifact_name(PlatformInfo('darwin', 'x64'))
        'nettune-darwin-amd64'
        >>> artifact_name(PlatformInfo('windows', 'x64'))
        'nettune-windows-amd64.exe'
    """
    os_name = _RELEASE_OS_NAMES[info.os]
    arch_name = _RELEASE_ARCH_NAMES[info.arch]
    ext = ".exe" if info.is_windows else ""
    return f"{PRODUCT_NAME}-{os_name}-{arch_name}{ext}"


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect the current platform.

    This function is cached - it only runs detection once per process.

    Raises:
        UnsupportedPlatform: If the host OS or architecture has no mapping
    """
    system = platform.system()
    machine = platform.machine()
    return PlatformInfo(os=_detect_os(system, machine), arch=_detect_arch(system, machine))


def _detect_os(system: str, machine: str = "") -> str:
    name = system.lower()
    # Cygwin/MSYS report e.g. 'CYGWIN_NT-10.0' but run native Windows binaries
    if name.startswith(("cygwin", "msys", "mingw")):
        return "windows"
    try:
        return _OS_MAP[name]
    except KeyError:
        raise UnsupportedPlatform(
            system, machine, f"supported OS: {', '.join(SUPPORTED_OS)}"
        ) from None


def _detect_arch(system: str, machine: str) -> str:
    try:
        return _ARCH_MAP[machine.lower()]
    except KeyError:
        raise UnsupportedPlatform(
            system, machine, f"supported arch: {', '.join(SUPPORTED_ARCH)}"
        ) from None


def is_supported_platform(info=None) -> bool:
    """
    Check whether the given platform (or the host) has published binaries.

    Example:
        >>> if is_supported_platform():
        ...     print("nettune binaries are available for this host")
    """
    if info is None:
        try:
            detect_platform()
        except UnsupportedPlatform:
            return False
        return True

    return info.os in SUPPORTED_OS and info.arch in SUPPORTED_ARCH


def get_supported_platforms() -> list[str]:
    """Get all supported platform strings."""
    return [f"{os_name}-{arch}" for os_name in SUPPORTED_OS for arch in SUPPORTED_ARCH]


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PRODUCT_NAME",
    "CHECKSUMS_FILE_NAME",
    "PlatformInfo",
    "artifact_name",
    "detect_platform",
    "is_supported_platform",
    "get_supported_platforms",
    "clear_platform_cache",
]
