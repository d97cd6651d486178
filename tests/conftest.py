"""
Pytest configuration and shared fixtures for nettune-launcher tests.
"""

import os
from pathlib import Path

import pytest

from helpers import API_URL, DOWNLOAD_URL, REPO
from nettune_launcher.core.config import ENV_VARS, LauncherConfig
from nettune_launcher.core.download import create_session
from nettune_launcher.core.platform import PlatformInfo, clear_platform_cache


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "posix: tests that rely on POSIX permissions, signals or shells"
    )


def pytest_collection_modifyitems(config, items):
    """Skip POSIX-only tests on Windows."""
    if os.name != "nt":
        return
    skip_posix = pytest.mark.skip(reason="requires a POSIX platform")
    for item in items:
        if "posix" in item.keywords:
            item.add_marker(skip_posix)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's NETTUNE_* settings out of tests."""
    for env_var in list(ENV_VARS) + ["NETTUNE_CONFIG"]:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def config(cache_dir: Path) -> LauncherConfig:
    """Launcher config pointing at mocked release hosts and a temp cache."""
    return LauncherConfig(
        cache_dir=cache_dir,
        github_repo=REPO,
        version="latest",
        api_url=API_URL,
        download_url=DOWNLOAD_URL,
        timeout=5,
    )


@pytest.fixture
def session():
    with create_session() as s:
        yield s


@pytest.fixture
def linux_x64() -> PlatformInfo:
    return PlatformInfo("linux", "x64")


@pytest.fixture
def windows_x64() -> PlatformInfo:
    return PlatformInfo("windows", "x64")
