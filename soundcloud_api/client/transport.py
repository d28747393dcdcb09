"""
HTTP transport for soundcloud-api.

The request executor never talks to the network directly. It hands a
fully built request to a Transport, which performs the exchange and
returns a TransportResponse. The default transport is built on a
requests.Session (connection pooling, TLS and proxies come from
requests/urllib3); tests substitute a fake that records calls.

Transport contract:
    send(method, url, headers, body, allow_redirects=..., timeout=...)
        -> TransportResponse(status_code, headers, body, url)

    - body is None, bytes, or a sized iterable of byte chunks. Iterables
      are streamed as they are produced, never joined in memory.
    - A network failure (DNS, TLS, connection reset, timeout) raises
      TransportError. Any HTTP status, including 4xx/5xx and 3xx with
      allow_redirects=False, is a normal TransportResponse.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol, Union

import requests
from requests.structures import CaseInsensitiveDict

from soundcloud_api.core.exceptions import TransportError


RequestBody = Union[bytes, Iterable[bytes], None]


@dataclass(frozen=True)
class TransportResponse:
    """
    Result of one HTTP exchange.

    Attributes:
        status_code: HTTP status code.
        headers: Response headers, case-insensitive.
        body: Raw response body.
        url: Final URL of the exchange. Equal to the request URL unless
             the transport followed redirects.
        reason: HTTP reason phrase, if the transport reports one.
    """
    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""
    url: str = ""
    reason: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            # frozen dataclass: bypass __setattr__ to normalise headers
            object.__setattr__(self, "headers", CaseInsensitiveDict(self.headers))

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """Capability the executor needs from an HTTP library."""

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: RequestBody = None,
        *,
        allow_redirects: bool = True,
        timeout: float | None = None
    ) -> TransportResponse:
        ...


class RequestsTransport:
    """
    Transport backed by a requests.Session.

    One session is reused for every request so connections are pooled.
    Pass an existing session to share a pool or to mount custom adapters;
    a session passed in is not closed by close().

    Attributes:
        session: The underlying requests.Session.

    Example:
        with RequestsTransport() as transport:
            client = SoundCloudClient(transport=transport, timeout=30)
            client.api_request("GET", "me")
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: RequestBody = None,
        *,
        allow_redirects: bool = True,
        timeout: float | None = None
    ) -> TransportResponse:
        """
        Execute one request.

        Raises:
            TransportError: Wrapping any requests.RequestException
                            (ConnectionError, Timeout, SSLError, ...).
        """
        try:
            response = self.session.request(
                method,
                url,
                headers=dict(headers),
                data=body,
                allow_redirects=allow_redirects,
                timeout=timeout
            )
        except requests.RequestException as e:
            raise TransportError(
                f"{method} {url} failed: {e}",
                details={"url": url, "original_error": str(e)}
            ) from e

        return TransportResponse(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=response.content,
            url=response.url or url,
            reason=response.reason or ""
        )

    def close(self) -> None:
        """Close the session if this transport created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
