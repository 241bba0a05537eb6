"""Profile configuration helpers."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import platformdirs
import yaml

from .constants import (
    CONFIG_FILE,
    DEFAULT_CLIENT_ID,
    DEFAULT_ENVIRONMENT,
    ENVIRONMENTS_FILE,
    PROFILE_APP_NAME,
    PROFILE_HOME_ENV,
)
from .errors import ConfigError

logger = logging.getLogger(__name__)


def get_profile_home() -> Path:
    """Directory holding config.yaml and environments.yaml.

    ``$CLOUD_PROFILE_HOME`` wins; otherwise the platform's user config dir.
    """
    override = os.environ.get(PROFILE_HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path(platformdirs.user_config_dir(PROFILE_APP_NAME))


@dataclass
class ProfileConfig:
    """User-level settings for environments and logins."""

    home: Path
    client_id: str = DEFAULT_CLIENT_ID
    default_environment: str = DEFAULT_ENVIRONMENT
    environments_file: Optional[Path] = None

    @property
    def environments_path(self) -> Path:
        return self.environments_file or self.home / ENVIRONMENTS_FILE


def load_profile_config(home: Optional[Path] = None) -> ProfileConfig:
    """Load profile configuration from <home>/config.yaml if present.

    Raises:
        ConfigError: If a key has the wrong type
    """
    home = home or get_profile_home()
    cfg_path = home / CONFIG_FILE
    if not cfg_path.exists():
        return ProfileConfig(home=home)

    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return ProfileConfig(home=home)

    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping, got {type(data).__name__}")

    for key in ("client_id", "default_environment", "environments_file"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{cfg_path}: '{key}' must be a string")

    environments_file = data.get("environments_file")
    return ProfileConfig(
        home=home,
        client_id=data.get("client_id") or DEFAULT_CLIENT_ID,
        default_environment=data.get("default_environment") or DEFAULT_ENVIRONMENT,
        environments_file=Path(environments_file).expanduser() if environments_file else None,
    )
