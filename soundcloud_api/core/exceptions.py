"""
Exception classes for soundcloud-api.

This module defines all custom exceptions used throughout the library.
Request failures share a single type, SoundCloudAPIError, whose `kind`
field tells callers what went wrong without parsing the message. Each
kind also has its own subclass so callers can catch or match on the
variant directly.

Exception Hierarchy:
    SoundCloudError (base)
        ConfigError - Configuration file issues
        SoundCloudAPIError - Any failed request (carries kind/http_status)
            PreconditionError - Local validation failed, nothing was sent
            TransportError - The HTTP exchange could not be completed
            ApiError - The API answered with a non-2xx status
            DecodeError - A 2xx body was not valid JSON
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of request failure kinds."""

    PRECONDITION = "precondition"
    TRANSPORT = "transport"
    API_ERROR = "api_error"
    DECODE = "decode"


class SoundCloudError(Exception):
    """
    Base exception for all soundcloud-api errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., path, url).

    Example:
        try:
            api.get_track(42)
        except SoundCloudError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'url': URL of the request that failed
                     - 'file_path': Local file involved in the error
                     - 'original_error': The underlying exception text
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(SoundCloudError):
    """
    Raised when there's an issue with the configuration file.

    Common causes:
        - config.yaml not found
        - config.yaml has invalid YAML syntax
        - Required fields missing (client_id)
        - Invalid field values (e.g., negative timeout)

    Example:
        raise ConfigError(
            "Missing required field 'client_id' in config.yaml",
            details={'file_path': '/path/to/config.yaml', 'missing_field': 'client_id'}
        )
    """
    pass


class SoundCloudAPIError(SoundCloudError):
    """
    Raised for every failed request, whatever the cause.

    The executor never catches or retries these; they propagate unchanged
    to the caller of api_request()/url_request() and of every SoundCloudAPI
    method built on them.

    Attributes:
        kind: ErrorKind identifying the failure family.
        http_status: HTTP status code, only set for API errors.

    Example:
        try:
            api.get_track(track_id)
        except SoundCloudAPIError as e:
            if e.kind is ErrorKind.API_ERROR and e.http_status == 404:
                ...
    """

    kind: ErrorKind = ErrorKind.API_ERROR

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        kind: ErrorKind | None = None,
        http_status: int | None = None
    ) -> None:
        super().__init__(message, details)
        if kind is not None:
            self.kind = kind
        self.http_status = http_status

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"http_status={self.http_status!r}, message={self.message!r})"
        )


class PreconditionError(SoundCloudAPIError):
    """
    Raised when local validation fails before any network call.

    Common causes:
        - Upload file does not exist or is not a regular file
        - Upload file exceeds the 500 MiB limit
        - Upload file changed size while being streamed
    """

    kind = ErrorKind.PRECONDITION


class TransportError(SoundCloudAPIError):
    """
    Raised when the HTTP transport could not complete the exchange.

    Common causes:
        - DNS resolution failure
        - TLS handshake failure
        - Connection refused or reset
        - Timeout
    """

    kind = ErrorKind.TRANSPORT


class ApiError(SoundCloudAPIError):
    """
    Raised when the API answered with a status outside 2xx.

    The message is the error text decoded from the JSON body when there
    is one, otherwise the raw body.

    Attributes:
        is_auth_error: True for 401 responses (token missing or expired).
                       Refreshing the token is left to the caller.
    """

    kind = ErrorKind.API_ERROR

    @property
    def is_auth_error(self) -> bool:
        return self.http_status == 401


class DecodeError(SoundCloudAPIError):
    """Raised when a 2xx response body cannot be decoded as JSON."""

    kind = ErrorKind.DECODE
