"""
Unit tests for the platform detection module.

Tests cover:
- PlatformInfo validation and platform strings
- Release file naming for every supported platform
- OS and architecture detection with mocking
- Cache behavior
"""

import pytest
from unittest.mock import patch

from nettune_launcher.core.exceptions import UnsupportedPlatform
from nettune_launcher.core.platform import (
    PlatformInfo,
    artifact_name,
    clear_platform_cache,
    detect_platform,
    get_supported_platforms,
    is_supported_platform,
)


class TestPlatformInfo:
    """Tests for PlatformInfo dataclass."""

    def test_platform_string(self):
        assert PlatformInfo("linux", "x64").platform_string() == "linux-x64"
        assert PlatformInfo("darwin", "arm64").platform_string() == "darwin-arm64"

    def test_str_is_platform_string(self):
        assert str(PlatformInfo("windows", "arm64")) == "windows-arm64"

    def test_is_frozen(self):
        info = PlatformInfo("linux", "x64")
        with pytest.raises(AttributeError):
            info.os = "darwin"

    def test_equal_values_are_equal(self):
        assert PlatformInfo("linux", "x64") == PlatformInfo("linux", "x64")
        assert hash(PlatformInfo("linux", "x64")) == hash(PlatformInfo("linux", "x64"))

    @pytest.mark.parametrize("os_name", ["win32", "freebsd", "macos", ""])
    def test_rejects_unknown_os(self, os_name):
        with pytest.raises(UnsupportedPlatform):
            PlatformInfo(os_name, "x64")

    @pytest.mark.parametrize("arch", ["amd64", "x86", "arm", "riscv64"])
    def test_rejects_unknown_arch(self, arch):
        with pytest.raises(UnsupportedPlatform) as exc_info:
            PlatformInfo("linux", arch)

        assert exc_info.value.os_name == "linux"
        assert exc_info.value.arch == arch


class TestArtifactName:
    """Tests for release file naming."""

    @pytest.mark.parametrize(
        "os_name,arch,expected",
        [
            ("darwin", "arm64", "nettune-darwin-arm64"),
            ("darwin", "x64", "nettune-darwin-amd64"),
            ("linux", "arm64", "nettune-linux-arm64"),
            ("linux", "x64", "nettune-linux-amd64"),
            ("windows", "x64", "nettune-windows-amd64.exe"),
            ("windows", "arm64", "nettune-windows-arm64.exe"),
        ],
    )
    def test_naming_convention(self, os_name, arch, expected):
        assert artifact_name(PlatformInfo(os_name, arch)) == expected

    def test_deterministic(self):
        info = PlatformInfo("linux", "x64")
        assert artifact_name(info) == artifact_name(PlatformInfo("linux", "x64"))

    def test_exe_only_on_windows(self):
        for platform_string in get_supported_platforms():
            os_name, arch = platform_string.split("-")
            name = artifact_name(PlatformInfo(os_name, arch))
            assert name.endswith(".exe") == (os_name == "windows")


class TestDetectPlatform:
    """Tests for host detection."""

    @pytest.mark.parametrize(
        "system,machine,expected",
        [
            ("Linux", "x86_64", PlatformInfo("linux", "x64")),
            ("Linux", "aarch64", PlatformInfo("linux", "arm64")),
            ("Darwin", "arm64", PlatformInfo("darwin", "arm64")),
            ("Darwin", "x86_64", PlatformInfo("darwin", "x64")),
            ("Windows", "AMD64", PlatformInfo("windows", "x64")),
            ("Windows", "ARM64", PlatformInfo("windows", "arm64")),
            ("CYGWIN_NT-10.0", "x86_64", PlatformInfo("windows", "x64")),
        ],
    )
    def test_detects_supported_hosts(self, system, machine, expected):
        with patch("platform.system", return_value=system), patch(
            "platform.machine", return_value=machine
        ):
            assert detect_platform() == expected

    def test_unsupported_os(self):
        with patch("platform.system", return_value="FreeBSD"), patch(
            "platform.machine", return_value="x86_64"
        ):
            with pytest.raises(UnsupportedPlatform, match="FreeBSD"):
                detect_platform()

    def test_unsupported_arch(self):
        with patch("platform.system", return_value="Linux"), patch(
            "platform.machine", return_value="armv7l"
        ):
            with pytest.raises(UnsupportedPlatform, match="armv7l"):
                detect_platform()

    def test_detection_is_cached(self):
        with patch("platform.system", return_value="Linux") as mock_system, patch(
            "platform.machine", return_value="x86_64"
        ):
            first = detect_platform()
            second = detect_platform()

        assert first is second
        assert mock_system.call_count == 1

    def test_clear_platform_cache(self):
        with patch("platform.system", return_value="Linux"), patch(
            "platform.machine", return_value="x86_64"
        ):
            detect_platform()

        clear_platform_cache()

        with patch("platform.system", return_value="Darwin"), patch(
            "platform.machine", return_value="arm64"
        ):
            assert detect_platform() == PlatformInfo("darwin", "arm64")


class TestSupport:
    """Tests for support queries."""

    def test_supported_platforms(self):
        platforms = get_supported_platforms()

        assert len(platforms) == 6
        assert "linux-x64" in platforms
        assert "windows-arm64" in platforms

    def test_is_supported_platform_with_info(self):
        assert is_supported_platform(PlatformInfo("darwin", "x64")) is True

    def test_is_supported_platform_for_unsupported_host(self):
        with patch("platform.system", return_value="SunOS"), patch(
            "platform.machine", return_value="sparc"
        ):
            assert is_supported_platform() is False
