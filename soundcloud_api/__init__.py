"""
soundcloud-api: A client library for the SoundCloud REST API.

Architecture:
    The library is split in two layers:

    client/ (request execution)
        - Holds the access token and client id of one client
        - Resolves paths against the API base URL
        - Adds "Authorization: OAuth <token>" when a token is set
        - Streams multipart uploads from disk (files up to 500 MiB)
        - Executes requests through a replaceable HTTP transport
        - Turns every failure into a SoundCloudAPIError with a kind

    api.py (operations)
        - One method per API operation (users, tracks, search, OAuth,
          uploads), each building a path and payload for the client

Modules:
    core/       - Configuration, logging, exceptions
    client/     - SoundCloudClient, transport, multipart bodies, payloads
    api.py      - SoundCloudAPI operations
    cli.py      - Command-line interface

Usage:
    Command Line:
        soundcloud track 42
        soundcloud search tracks "ambient drone"
        soundcloud upload "Demo" demo.mp3 --artwork cover.jpg

    Python API:
        from soundcloud_api import SoundCloudAPI, SoundCloudClient

        api = SoundCloudAPI(SoundCloudClient(timeout=30))
        api.set_client_id(client_id)
        token = api.authenticate(client_secret)
        api.set_access_token(token["access_token"])

        track = api.get_track(42)

Error handling:
    from soundcloud_api import SoundCloudAPIError, ErrorKind

    try:
        api.get_track(42)
    except SoundCloudAPIError as e:
        if e.kind is ErrorKind.API_ERROR and e.http_status == 401:
            ...  # refresh the token and try again

Dependencies:
    - requests: HTTP transport
    - pyyaml: Configuration file parsing
    - rich-click: CLI framework
    - tqdm: Upload progress bar
"""

__version__ = "0.1.0"
__author__ = "soundcloud-api"
__license__ = "MIT"

# Convenience imports for common usage
from soundcloud_api.core import (
    ApiError,
    Config,
    ConfigError,
    DecodeError,
    ErrorKind,
    PreconditionError,
    SoundCloudAPIError,
    SoundCloudError,
    TransportError,
    get_logger,
    load_config,
    setup_logging,
)
from soundcloud_api.client import (
    Collection,
    CredentialState,
    MultipartForm,
    RequestsTransport,
    Resource,
    SoundCloudClient,
    TransportResponse,
)
from soundcloud_api.api import SoundCloudAPI

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "SoundCloudError",
    "ConfigError",
    "SoundCloudAPIError",
    "ErrorKind",
    "PreconditionError",
    "TransportError",
    "ApiError",
    "DecodeError",
    # Client
    "SoundCloudClient",
    "CredentialState",
    "RequestsTransport",
    "TransportResponse",
    "MultipartForm",
    "Resource",
    "Collection",
    # Operations
    "SoundCloudAPI",
]
