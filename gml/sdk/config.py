"""Configuration management for gml.

Handles loading the YAML configuration from ~/.config/gml/ and turning it
into a Config value that is passed explicitly to every operation.
"""

import os
import yaml
import logging
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

AUTH_TYPE_OAUTH = "oauth"
AUTH_TYPE_SERVICE_ACCOUNT = "service_account"
AUTH_TYPES = (AUTH_TYPE_OAUTH, AUTH_TYPE_SERVICE_ACCOUNT)

DEFAULT_CONFIG = {
    "auth_type": AUTH_TYPE_OAUTH,
    "application_credentials": None,
    "user_credentials": None,
    "subject": None,
}

# Environment variables that override values from the config file
ENV_OVERRIDES = {
    "GML_AUTH_TYPE": "auth_type",
    "GML_APPLICATION_CREDENTIALS": "application_credentials",
    "GML_USER_CREDENTIALS": "user_credentials",
    "GML_SUBJECT": "subject",
}


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    env_path = os.getenv("GML_CONFIG_DIR")
    if env_path:
        return Path(env_path)
    return Path.home() / ".config" / "gml"


def get_config_file_path(path: Optional[str] = None) -> Path:
    """
    Get the path to the config file.

    An explicit path wins, then the GML_CONFIG_FILE env var, then
    config.yaml inside the config directory.
    """
    if path:
        return Path(path).expanduser()
    env_path = os.getenv("GML_CONFIG_FILE")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


class Config:
    """Resolved gml configuration. Treated as read-only once loaded."""

    def __init__(
        self,
        auth_type: str = AUTH_TYPE_OAUTH,
        application_credentials: Optional[str] = None,
        user_credentials: Optional[str] = None,
        subject: Optional[str] = None,
        source: Optional[Path] = None,
    ):
        self.auth_type = auth_type or AUTH_TYPE_OAUTH
        self.application_credentials = _expand(application_credentials)
        self.user_credentials = _expand(user_credentials)
        self.subject = subject
        self.source = source

    @classmethod
    def from_dict(cls, data: dict, source: Optional[Path] = None) -> "Config":
        return cls(
            auth_type=data.get("auth_type"),
            application_credentials=data.get("application_credentials"),
            user_credentials=data.get("user_credentials"),
            subject=data.get("subject"),
            source=source,
        )

    def validate(self):
        """
        Check that the settings required by the selected auth type are present.

        Raises:
            ConfigError: If a required value is missing or auth_type is unknown
        """
        if self.auth_type not in AUTH_TYPES:
            raise ConfigError(
                f"invalid auth_type '{self.auth_type}' "
                f"(expected one of: {', '.join(AUTH_TYPES)})"
            )
        if not self.application_credentials:
            raise ConfigError("application_credentials is required")
        if self.auth_type == AUTH_TYPE_OAUTH and not self.user_credentials:
            raise ConfigError("user_credentials is required for OAuth authentication")

    def __repr__(self):
        return (
            f"Config(auth_type={self.auth_type!r}, "
            f"application_credentials={self.application_credentials!r}, "
            f"user_credentials={self.user_credentials!r}, "
            f"subject={self.subject!r}, "
            f"source={self.source!r})"
        )


def load_config(path: Optional[str] = None) -> Config:
    """
    Load and validate the gml configuration.

    Args:
        path: Optional explicit config file path (the --config option)

    Returns:
        A validated Config

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid
    """
    config_file = get_config_file_path(path)
    if not config_file.exists():
        raise ConfigError(
            f"config file not found. Please create a config file at {config_file}"
        )

    try:
        with open(config_file, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"unable to read config file {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"unable to read config file {config_file}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {config_file} must contain a mapping")

    merged = _deep_merge(DEFAULT_CONFIG.copy(), data)
    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            merged[key] = value

    logger.debug(f"Loaded configuration from {config_file}")
    config = Config.from_dict(merged, source=config_file)
    config.validate()
    return config


def _expand(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return os.path.expanduser(str(path))


def _deep_merge(base: dict, new: dict) -> dict:
    """Recursively merge dictionary `new` into `base`."""
    for k, v in new.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            base[k] = _deep_merge(base[k], v)
        else:
            base[k] = v
    return base
