"""
Request execution layer for soundcloud-api.

This package provides:
    - credentials: Per-client access token and client id
    - transport: Transport protocol and the requests-based implementation
    - multipart: Streamed multipart/form-data upload bodies
    - models: Resource / Collection response payload types
    - client: SoundCloudClient, which ties the above together

Usage:
    from soundcloud_api.client import SoundCloudClient, MultipartForm

    client = SoundCloudClient(timeout=30)
    client.set_access_token(token)
    track = client.api_request("GET", "tracks/42")
"""

from soundcloud_api.client.client import API_BASE_URL, SoundCloudClient
from soundcloud_api.client.credentials import CredentialState
from soundcloud_api.client.models import Collection, Payload, Resource, decode_payload
from soundcloud_api.client.multipart import (
    MAX_UPLOAD_SIZE,
    FilePart,
    MultipartForm,
    MultipartStream,
    check_upload_file,
)
from soundcloud_api.client.transport import (
    RequestsTransport,
    Transport,
    TransportResponse,
)

__all__ = [
    # Client
    "SoundCloudClient",
    "API_BASE_URL",
    "CredentialState",
    # Payloads
    "Resource",
    "Collection",
    "Payload",
    "decode_payload",
    # Uploads
    "MultipartForm",
    "MultipartStream",
    "FilePart",
    "MAX_UPLOAD_SIZE",
    "check_upload_file",
    # Transport
    "Transport",
    "TransportResponse",
    "RequestsTransport",
]
