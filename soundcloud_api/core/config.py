"""
Configuration management for soundcloud-api.

This module handles loading, validating, and providing access to the
configuration stored in config.yaml. The library itself never needs a
config file (SoundCloudClient takes plain arguments); the file is how the
command-line interface and scripts keep credentials out of the code.

The configuration file contains:
    - SoundCloud application credentials (client_id, client_secret)
    - An optional pre-issued access token
    - HTTP settings (API base URL, request timeout)

Example config.yaml:
    soundcloud:
      client_id: "your_client_id_here"
      client_secret: "your_client_secret_here"
      access_token: null

    http:
      base_url: "https://api.soundcloud.com/"
      timeout: 30
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from soundcloud_api.core.exceptions import ConfigError

if TYPE_CHECKING:
    from soundcloud_api.client.client import SoundCloudClient


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_BASE_URL = "https://api.soundcloud.com/"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class SoundCloudConfig:
    """
    SoundCloud application credentials.

    Attributes:
        client_id: The application client ID. Sent in OAuth token requests.
        client_secret: The application client secret, or None when the
                       configuration is only used with a pre-issued token.
        access_token: Optional OAuth access token. When set, every request
                      carries an "Authorization: OAuth <token>" header.
    """
    client_id: str
    client_secret: str | None = None
    access_token: str | None = None


@dataclass(frozen=True)
class HttpConfig:
    """
    HTTP transport settings.

    Attributes:
        base_url: API root that relative request paths are resolved against.
        timeout: Seconds forwarded to the transport for each request,
                 or None to use the transport default (no timeout).
    """
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class Config:
    """
    Complete configuration.

    Created by load_config() and treated as immutable (frozen dataclass).
    Use with_access_token() to derive a copy with a different token.

    Example:
        config = load_config()
        client = config.create_client()
    """
    soundcloud: SoundCloudConfig
    http: HttpConfig

    def with_access_token(self, access_token: str | None) -> "Config":
        """Return a copy of this configuration using another access token."""
        return replace(
            self,
            soundcloud=replace(self.soundcloud, access_token=access_token)
        )

    def create_client(self) -> "SoundCloudClient":
        """
        Build a SoundCloudClient from this configuration.

        The client gets its own RequestsTransport and credential state,
        pre-populated with client_id and access_token.
        """
        from soundcloud_api.client.client import SoundCloudClient

        client = SoundCloudClient(
            base_url=self.http.base_url,
            timeout=self.http.timeout
        )
        client.set_client_id(self.soundcloud.client_id)
        if self.soundcloud.access_token:
            client.set_access_token(self.soundcloud.access_token)
        return client


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the config file is not found, has invalid YAML syntax,
                     is missing required fields, or contains invalid values.

    Behavior:
        1. Locate config file (explicit path or CWD/config.yaml)
        2. Read and parse YAML content
        3. Validate structure (required sections exist)
        4. Validate and extract soundcloud credentials
        5. Validate http settings with defaults
        6. Create and return frozen Config object
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    _validate_config(raw_config)

    return Config(
        soundcloud=_parse_soundcloud_config(raw_config["soundcloud"]),
        http=_parse_http_config(raw_config.get("http"))
    )


def _validate_config(raw_config: dict[str, Any]) -> None:
    """
    Check the raw configuration has the required sections.

    Raises:
        ConfigError: If a section is missing or is not a dictionary.
    """
    if "soundcloud" not in raw_config:
        raise ConfigError(
            "Missing required section: 'soundcloud'",
            details={"missing_section": "soundcloud"}
        )

    for section in ("soundcloud", "http"):
        value = raw_config.get(section)
        if section == "http" and value is None:
            continue
        if not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )


def _optional_string(section: dict[str, Any], field: str, full_name: str) -> str | None:
    value = section.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(
            f"'{full_name}' must be a string or null",
            details={"field": full_name}
        )
    return value.strip() or None


def _parse_soundcloud_config(section: dict[str, Any]) -> SoundCloudConfig:
    """
    Parse and validate the soundcloud configuration section.

    Raises:
        ConfigError: If client_id is missing or empty, or an optional
                     field has the wrong type.
    """
    client_id = section.get("client_id", "")

    if not isinstance(client_id, str) or not client_id.strip():
        raise ConfigError(
            "'soundcloud.client_id' must be a non-empty string",
            details={"field": "soundcloud.client_id"}
        )

    return SoundCloudConfig(
        client_id=client_id.strip(),
        client_secret=_optional_string(section, "client_secret", "soundcloud.client_secret"),
        access_token=_optional_string(section, "access_token", "soundcloud.access_token")
    )


def _parse_http_config(section: dict[str, Any] | None) -> HttpConfig:
    """
    Parse and validate the http configuration section.

    Applies defaults if the section is missing or fields are not specified.
    An explicit `timeout: null` disables the timeout.

    Raises:
        ConfigError: If base_url is not an http(s) URL or timeout is not
                     a positive number.
    """
    if section is None:
        return HttpConfig()

    base_url = section.get("base_url", DEFAULT_BASE_URL)
    if not isinstance(base_url, str) or not base_url.startswith(("http://", "https://")):
        raise ConfigError(
            "'http.base_url' must be an http(s) URL",
            details={"field": "http.base_url", "value": base_url}
        )

    timeout = section.get("timeout", DEFAULT_TIMEOUT)
    if timeout is not None:
        # bool is an int subclass; reject it explicitly
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(
                "'http.timeout' must be a positive number or null",
                details={"field": "http.timeout", "value": timeout}
            )
        timeout = float(timeout)

    return HttpConfig(base_url=base_url, timeout=timeout)
