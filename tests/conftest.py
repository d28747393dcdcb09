"""Test configuration and fixtures"""

import json
import tempfile
from dataclasses import dataclass
from pathlib import Path

import pytest

from soundcloud_api.api import SoundCloudAPI
from soundcloud_api.client.client import SoundCloudClient
from soundcloud_api.client.transport import TransportResponse

BASE_URL = "https://api.soundcloud.com/"


@dataclass
class RecordedRequest:
    """One call made to FakeTransport.send()"""
    method: str
    url: str
    headers: dict
    body: bytes | None
    body_length: int | None
    allow_redirects: bool
    timeout: float | None


class FakeTransport:
    """
    Transport double that records requests and replays queued responses.

    Streamed bodies are drained into bytes unless consume_body is False
    (used for very large sparse upload files).
    """

    def __init__(self, consume_body: bool = True) -> None:
        self.consume_body = consume_body
        self.requests: list[RecordedRequest] = []
        self.responses: list[TransportResponse | Exception] = []

    def queue(self, status_code=200, body=b"", headers=None, url="", reason=""):
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode("utf-8")
        elif isinstance(body, str):
            body = body.encode("utf-8")
        self.responses.append(
            TransportResponse(
                status_code=status_code,
                headers=headers or {},
                body=body,
                url=url,
                reason=reason
            )
        )

    def fail_with(self, error: Exception) -> None:
        self.responses.append(error)

    def send(self, method, url, headers, body=None, *, allow_redirects=True, timeout=None):
        body_length = len(body) if body is not None and hasattr(body, "__len__") else None
        if body is not None and not isinstance(body, bytes) and self.consume_body:
            body = b"".join(body)
        self.requests.append(
            RecordedRequest(
                method=method,
                url=url,
                headers=dict(headers),
                body=body if isinstance(body, bytes) or body is None else None,
                body_length=body_length,
                allow_redirects=allow_redirects,
                timeout=timeout
            )
        )
        if not self.responses:
            return TransportResponse(status_code=200, body=b"{}", url=url)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if not response.url:
            response = TransportResponse(
                status_code=response.status_code,
                headers=response.headers,
                body=response.body,
                url=url,
                reason=response.reason
            )
        return response

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def transport():
    """Fake transport with no queued responses"""
    return FakeTransport()


@pytest.fixture
def client(transport):
    """Client wired to the fake transport"""
    return SoundCloudClient(transport=transport, base_url=BASE_URL, timeout=10)


@pytest.fixture
def api(client):
    """Operations bound to the fake-transport client"""
    return SoundCloudAPI(client)


@pytest.fixture
def track_file(temp_dir):
    """Small audio file for upload tests"""
    path = temp_dir / "song.mp3"
    path.write_bytes(b"ID3" + b"\x00" * 61)
    return path


@pytest.fixture
def artwork_file(temp_dir):
    """Small artwork file for upload tests"""
    path = temp_dir / "cover.jpg"
    path.write_bytes(b"\xff\xd8\xff" + b"\x00" * 29)
    return path


@pytest.fixture
def sparse_file(temp_dir):
    """Factory creating files of a given size without writing their content"""
    def factory(name: str, size: int) -> Path:
        path = temp_dir / name
        with open(path, "wb") as f:
            f.truncate(size)
        return path
    return factory


@pytest.fixture
def lazy_transport():
    """Fake transport that leaves streamed bodies unread"""
    return FakeTransport(consume_body=False)
