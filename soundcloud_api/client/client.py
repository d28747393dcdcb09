"""
Request execution layer for soundcloud-api.

SoundCloudClient turns an abstract (method, path, headers, body) request
into one HTTP exchange and a normalized outcome. It owns the credential
state, resolves paths against the API base URL, signs requests with the
access token, picks the body encoding from the body's shape, and maps
every failure onto the SoundCloudAPIError taxonomy.

Body dispatch:
    None            -> no body
    str / bytes     -> sent verbatim (str encoded as UTF-8); used for the
                       form-urlencoded OAuth token requests
    Mapping         -> URL-encoded form fields
    MultipartForm   -> streamed multipart/form-data, files read lazily

Outcome classification:
    transport raised          -> TransportError
    2xx, JSON object          -> Resource
    2xx, JSON array           -> Collection
    2xx, not JSON             -> DecodeError
    anything else             -> ApiError(http_status, decoded message)

Nothing is retried here. A 401 caused by an expired token surfaces as an
ApiError with is_auth_error=True; refreshing and replaying is up to the
caller.

Usage:
    from soundcloud_api.client import SoundCloudClient

    client = SoundCloudClient(timeout=30)
    client.set_access_token("1-2345-abcdef")
    me = client.api_request("GET", "me")
    stream_url = client.url_request("GET", "tracks/42/stream")
"""

import json
from collections.abc import Mapping
from urllib.parse import urlencode

from requests.structures import CaseInsensitiveDict

from soundcloud_api.client.credentials import CredentialState
from soundcloud_api.client.models import Payload, decode_payload
from soundcloud_api.client.multipart import MultipartForm, MultipartStream
from soundcloud_api.client.transport import (
    RequestBody,
    RequestsTransport,
    Transport,
    TransportResponse,
)
from soundcloud_api.core.exceptions import ApiError, TransportError
from soundcloud_api.core.logger import get_logger

logger = get_logger(__name__)


API_BASE_URL = "https://api.soundcloud.com/"

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Keys checked, in order, for an error message in a JSON error body
ERROR_MESSAGE_KEYS = ("error_description", "message", "error")


def _normalize_method(method: str) -> str:
    normalized = method.upper()
    if normalized not in ALLOWED_METHODS:
        raise ValueError(
            f"Unsupported HTTP method '{method}', expected one of "
            f"{', '.join(sorted(ALLOWED_METHODS))}"
        )
    return normalized


def extract_error_message(response: TransportResponse) -> str:
    """
    Find a human-readable message in an error response.

    Tries the JSON body first: the SoundCloud `errors` list
    ([{"error_message": ...}]), then `error_description`, `message` and
    `error`. An OAuth body carrying both `error` and `error_description`
    yields "error: description". Falls back to the raw body text, then to
    the HTTP reason phrase.
    """
    text = response.text.strip()

    try:
        decoded = json.loads(response.body) if text else None
    except ValueError:
        decoded = None

    if isinstance(decoded, dict):
        errors = decoded.get("errors")
        if isinstance(errors, list):
            messages = [
                item["error_message"] for item in errors
                if isinstance(item, dict) and isinstance(item.get("error_message"), str)
            ]
            if messages:
                return "; ".join(messages)

        error = decoded.get("error")
        description = decoded.get("error_description")
        if isinstance(error, str) and isinstance(description, str):
            return f"{error}: {description}"

        for key in ERROR_MESSAGE_KEYS:
            value = decoded.get(key)
            if isinstance(value, str) and value:
                return value

    if text:
        return text
    return response.reason or f"HTTP {response.status_code}"


class SoundCloudClient:
    """
    Executes requests against the SoundCloud API.

    One instance holds one CredentialState and one Transport. Instances
    are independent; run as many as you need with different credentials.

    Thread Safety:
        api_request() and url_request() may be called concurrently from
        several threads. Each call blocks its thread until the transport
        returns. Rotating the token while calls are in flight is allowed;
        a call uses whichever token was current when it was built.

    Attributes:
        base_url: API root that relative paths are resolved against.
        timeout: Seconds forwarded to the transport, or None.
        credentials: The CredentialState read on every request.

    Args:
        transport: HTTP transport. Defaults to a new RequestsTransport.
        base_url: API root. Defaults to https://api.soundcloud.com/.
        timeout: Per-request timeout forwarded to the transport.
        credentials: Existing credential state to share. Defaults to a
                     new, empty one.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        base_url: str = API_BASE_URL,
        timeout: float | None = None,
        credentials: CredentialState | None = None
    ) -> None:
        self._transport = transport if transport is not None else RequestsTransport()
        self.base_url = base_url
        self.timeout = timeout
        self.credentials = credentials if credentials is not None else CredentialState()

    @property
    def transport(self) -> Transport:
        return self._transport

    # =========================================================================
    # Credentials
    # =========================================================================

    def set_access_token(self, token: str | None) -> None:
        self.credentials.set_access_token(token)

    def set_client_id(self, client_id: str | None) -> None:
        self.credentials.set_client_id(client_id)

    def get_access_token(self) -> str | None:
        return self.credentials.get_access_token()

    def get_client_id(self) -> str | None:
        return self.credentials.get_client_id()

    # =========================================================================
    # Request construction
    # =========================================================================

    def build_url(self, path: str) -> str:
        """
        Resolve a path against the base URL.

        The path is used as given: it may carry a query string, which the
        caller is responsible for encoding. Absolute http(s) URLs (such as
        a `next_href` pagination link) are returned unchanged.
        """
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def build_headers(self, headers: Mapping[str, str] | None = None) -> CaseInsensitiveDict:
        """
        Copy the caller's headers and add the Authorization header.

        The token is read exactly once, so concurrent rotation can never
        produce a mixed value. Without a token no Authorization header is
        added and the request goes out unauthenticated.
        """
        request_headers = CaseInsensitiveDict(headers or {})
        token = self.credentials.get_access_token()
        if token:
            request_headers["Authorization"] = f"OAuth {token}"
        return request_headers

    # =========================================================================
    # Execution
    # =========================================================================

    def api_request(
        self,
        method: str,
        path: str,
        headers: Mapping[str, str] | None = None,
        body: str | bytes | Mapping[str, object] | MultipartForm | None = None
    ) -> Payload:
        """
        Perform a request and decode the JSON response.

        Args:
            method: GET, POST, PUT or DELETE.
            path: Path relative to the base URL, query string included.
            headers: Extra request headers.
            body: Request body, see the module docstring for dispatch rules.

        Redirects are followed, except for multipart bodies: a 307/308
        would need the upload stream a second time, so the 3xx is returned
        as an ApiError instead.

        Returns:
            Resource for a JSON object response, Collection for a JSON array.

        Raises:
            PreconditionError: If a multipart file can no longer be read.
            TransportError: If the exchange could not be completed.
            ApiError: If the status code is outside 2xx.
            DecodeError: If a 2xx body is not JSON.
            ValueError: If the method is not supported.
            TypeError: If the body type is not supported.
        """
        method = _normalize_method(method)
        url = self.build_url(path)
        request_headers = self.build_headers(headers)

        stream: MultipartStream | None = None
        payload: RequestBody

        if isinstance(body, MultipartForm):
            request_headers.update(body.headers())
            stream = body.stream()
            payload = stream
        elif isinstance(body, Mapping):
            payload = urlencode([(key, str(value)) for key, value in body.items()]).encode("ascii")
            if "Content-Type" not in request_headers:
                request_headers["Content-Type"] = FORM_CONTENT_TYPE
        elif isinstance(body, str):
            payload = body.encode("utf-8")
        elif isinstance(body, bytes) or body is None:
            payload = body
        else:
            raise TypeError(f"Unsupported request body type: {type(body).__name__}")

        # A one-shot stream cannot be replayed to a 307/308 target
        try:
            response = self._send(
                method, url, request_headers, payload, allow_redirects=stream is None
            )
        finally:
            if stream is not None:
                stream.close()

        if not response.ok:
            raise self._api_error(method, url, response)

        return decode_payload(response.body, url)

    def url_request(self, method: str, path: str) -> str:
        """
        Resolve a redirecting endpoint to its target URL without following it.

        Used for stream URLs: the API answers with a redirect to a signed
        media URL, and only that URL is wanted, not the media itself.

        Returns:
            The literal Location header of the response, or the final URL
            reported by the transport when it has no Location but did move.

        Raises:
            TransportError: If the exchange could not be completed.
            ApiError: If the status is neither 2xx nor 3xx, or no target
                      URL could be found ("no location header").
        """
        method = _normalize_method(method)
        url = self.build_url(path)
        request_headers = self.build_headers()

        response = self._send(method, url, request_headers, None, allow_redirects=False)

        location = response.headers.get("Location")
        if location:
            return location

        if not response.ok and not response.is_redirect:
            raise self._api_error(method, url, response)

        if response.url and response.url != url:
            return response.url

        raise ApiError(
            "no location header",
            details={"method": method, "url": url},
            http_status=response.status_code
        )

    def _send(
        self,
        method: str,
        url: str,
        headers: CaseInsensitiveDict,
        body: RequestBody,
        allow_redirects: bool
    ) -> TransportResponse:
        logger.debug(f"{method} {url}")
        try:
            response = self._transport.send(
                method,
                url,
                headers,
                body,
                allow_redirects=allow_redirects,
                timeout=self.timeout
            )
        except OSError as e:
            # Raw socket errors from transports that don't wrap their own
            raise TransportError(
                f"{method} {url} failed: {e}",
                details={"url": url, "original_error": str(e)}
            ) from e
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    @staticmethod
    def _api_error(method: str, url: str, response: TransportResponse) -> ApiError:
        return ApiError(
            extract_error_message(response),
            details={"method": method, "url": url, "body": response.text},
            http_status=response.status_code
        )
