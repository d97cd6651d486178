"""
Launcher configuration.

Configuration is layered, lowest to highest precedence:
    1. Built-in defaults
    2. YAML file ($NETTUNE_CONFIG or an explicit path)
    3. Environment variables (NETTUNE_*)
    4. Explicit overrides (CLI flags)

Example nettune-launcher.yaml:

    version: v0.3.1
    github_repo: jtsang4/nettune
    cache_dir: ~/.cache/nettune
    timeout: 60
    env:
      NETTUNE_LOG_LEVEL: debug
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .directory import get_default_cache_dir
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_GITHUB_REPO = "jtsang4/nettune"
DEFAULT_VERSION = "latest"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_DOWNLOAD_URL = "https://github.com"
DEFAULT_TIMEOUT = 30.0

CONFIG_FILE_ENV = "NETTUNE_CONFIG"

# Environment variable -> config field
ENV_VARS = {
    "NETTUNE_CACHE_DIR": "cache_dir",
    "NETTUNE_GITHUB_REPO": "github_repo",
    "NETTUNE_VERSION": "version",
    "NETTUNE_API_URL": "api_url",
    "NETTUNE_DOWNLOAD_URL": "download_url",
    "NETTUNE_HTTP_TIMEOUT": "timeout",
}


@dataclass
class LauncherConfig:
    """Settings for resolving, caching and launching the nettune binary."""

    cache_dir: Path = field(default_factory=get_default_cache_dir)
    github_repo: str = DEFAULT_GITHUB_REPO
    version: str = DEFAULT_VERSION
    api_url: str = DEFAULT_API_URL
    download_url: str = DEFAULT_DOWNLOAD_URL
    timeout: float = DEFAULT_TIMEOUT
    env: Dict[str, str] = field(default_factory=dict)
    """Extra environment variables for the child process"""

    @property
    def releases_url(self) -> str:
        """Human-facing listing of all releases."""
        return f"{self.download_url.rstrip('/')}/{self.github_repo}/releases"

    @property
    def releases_download_root(self) -> str:
        """Root under which <version>/<file> download URLs live."""
        return f"{self.releases_url}/download"

    @property
    def latest_release_url(self) -> str:
        return f"{self.api_url.rstrip('/')}/repos/{self.github_repo}/releases/latest"


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required but missing, or is not a YAML mapping
    """
    config_file = Path(config_file).expanduser()
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read {config_file}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_file} must be a mapping")
    return config


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> LauncherConfig:
    """
    Build a LauncherConfig from file, environment and explicit overrides.

    Args:
        config_file: YAML file to read. Required to exist when given;
            otherwise $NETTUNE_CONFIG is read if set and the file exists.
        environ: Environment mapping (default: os.environ)
        **overrides: Field values that win over everything else. None
            values are ignored so unset CLI flags fall through.

    Raises:
        ConfigError: On unknown keys or invalid values
    """
    if environ is None:
        environ = os.environ

    values: Dict[str, Any] = {}

    if config_file is not None:
        values.update(load_yaml_config(config_file, required=True))
    elif environ.get(CONFIG_FILE_ENV):
        values.update(load_yaml_config(Path(environ[CONFIG_FILE_ENV])))

    for env_var, field_name in ENV_VARS.items():
        if environ.get(env_var):
            values[field_name] = environ[env_var]

    values.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(LauncherConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    if "cache_dir" not in values:
        values["cache_dir"] = get_default_cache_dir(environ)

    return _build(values)


def _build(values: Dict[str, Any]) -> LauncherConfig:
    cache_dir = values["cache_dir"]
    if not isinstance(cache_dir, (str, os.PathLike)) or not str(cache_dir):
        raise ConfigError(f"cache_dir must be a non-empty path, got {cache_dir!r}")
    values["cache_dir"] = Path(cache_dir).expanduser()

    if "timeout" in values:
        try:
            timeout = float(values["timeout"])
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid timeout: {values['timeout']!r}") from None
        if timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {timeout}")
        values["timeout"] = timeout

    # YAML reads an unquoted `version: 1.2` as a float
    if isinstance(values.get("version"), (int, float)) and not isinstance(
        values["version"], bool
    ):
        values["version"] = str(values["version"])

    for key in ("github_repo", "version", "api_url", "download_url"):
        if key in values and (not isinstance(values[key], str) or not values[key]):
            raise ConfigError(f"{key} must be a non-empty string")

    if "github_repo" in values and values["github_repo"].count("/") != 1:
        raise ConfigError(
            f"github_repo must look like OWNER/NAME, got {values['github_repo']!r}"
        )

    env = values.get("env", {})
    if not isinstance(env, dict):
        raise ConfigError("env must be a mapping of variable names to values")
    values["env"] = {str(k): str(v) for k, v in env.items()}

    return LauncherConfig(**values)


__all__ = [
    "LauncherConfig",
    "load_config",
    "load_yaml_config",
    "ENV_VARS",
    "DEFAULT_GITHUB_REPO",
    "DEFAULT_VERSION",
]
