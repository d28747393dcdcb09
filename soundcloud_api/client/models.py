"""
Response payload types for soundcloud-api.

The API answers either with a single JSON object (a user, a track, a
token) or with a JSON array (search results, followings). The two shapes
are modelled as distinct types so callers can branch on them:

    result = client.api_request("GET", "me/followings")
    match result:
        case Collection():
            for user in result: ...
        case Resource():
            ...

Both subclass the builtin containers, so the decoded payload is passed
through unmodified: Resource({"id": 1}) == {"id": 1}.
"""

import json
from typing import Any, Union

from soundcloud_api.core.exceptions import DecodeError


class Resource(dict):
    """A single JSON object returned by the API."""

    def __repr__(self) -> str:
        return f"Resource({dict.__repr__(self)})"


class Collection(list):
    """A JSON array returned by the API, in the API's order."""

    def __repr__(self) -> str:
        return f"Collection({list.__repr__(self)})"


Payload = Union[Resource, Collection]


def decode_payload(body: bytes, url: str | None = None) -> Payload:
    """
    Decode a 2xx response body into a Resource or Collection.

    Args:
        body: Raw response body.
        url: Request URL, only used for error details.

    Returns:
        Resource for a JSON object, Collection for a JSON array.
        An empty body (e.g. 204 No Content) yields an empty Resource.

    Raises:
        DecodeError: If the body is not valid UTF-8 JSON, or its top-level
                     value is neither an object nor an array.
    """
    if not body.strip():
        return Resource()

    try:
        decoded: Any = json.loads(body)
    except ValueError as e:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise DecodeError(
            f"Invalid JSON in response body: {e}",
            details={"url": url, "original_error": str(e)}
        ) from e

    if isinstance(decoded, dict):
        return Resource(decoded)
    if isinstance(decoded, list):
        return Collection(decoded)

    raise DecodeError(
        f"Unexpected JSON value in response body: {type(decoded).__name__}",
        details={"url": url}
    )
