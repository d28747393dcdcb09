"""
Core module for soundcloud-api.

This module provides the foundational components used throughout the library:
    - exceptions: Exception taxonomy for configuration and request failures
    - config: Configuration loading and validation
    - logger: Logging setup for the command-line interface

Usage:
    from soundcloud_api.core import (
        Config, load_config,
        setup_logging, get_logger,
        SoundCloudAPIError, ErrorKind
    )
"""

from soundcloud_api.core.config import (
    Config,
    HttpConfig,
    SoundCloudConfig,
    load_config,
)
from soundcloud_api.core.exceptions import (
    ApiError,
    ConfigError,
    DecodeError,
    ErrorKind,
    PreconditionError,
    SoundCloudAPIError,
    SoundCloudError,
    TransportError,
)
from soundcloud_api.core.logger import (
    get_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "SoundCloudConfig",
    "HttpConfig",
    "load_config",
    # Exceptions
    "SoundCloudError",
    "ConfigError",
    "SoundCloudAPIError",
    "ErrorKind",
    "PreconditionError",
    "TransportError",
    "ApiError",
    "DecodeError",
    # Logger
    "setup_logging",
    "get_logger",
    "shutdown_logging",
]
