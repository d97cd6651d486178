"""
Shared utilities for CLI commands.
"""

import logging

from nettune_launcher.core.config import LauncherConfig, load_config
from nettune_launcher.core.download import DownloadProgress

logger = logging.getLogger(__name__)


def load_config_from_args(args) -> LauncherConfig:
    """
    Build the launcher configuration, letting CLI flags win.

    Args:
        args: Parsed arguments with config/cache_dir/repo/binary_version

    Raises:
        ConfigError: If the configuration is invalid
    """
    return load_config(
        config_file=getattr(args, "config", None),
        cache_dir=getattr(args, "cache_dir", None),
        github_repo=getattr(args, "repo", None),
        version=getattr(args, "binary_version", None),
    )


def log_progress(progress: DownloadProgress) -> None:
    """Progress callback that reports downloads at debug level."""
    logger.debug(f"Downloading: {progress}")
