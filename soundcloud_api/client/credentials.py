"""
Per-client credential state.

Each SoundCloudClient owns one CredentialState; nothing is stored at
module level, so several independently configured clients can live in the
same process.
"""


class CredentialState:
    """
    Current access token and client id of one client.

    Setters are plain attribute assignments and may be called at any time,
    including while other threads have requests in flight. The executor
    reads the token once per request, so a request started around a token
    rotation uses either the old or the new token, never a mix.

    Empty strings are stored as None: an empty token means "no token".
    """

    def __init__(self, access_token: str | None = None, client_id: str | None = None) -> None:
        self._access_token = access_token or None
        self._client_id = client_id or None

    def set_access_token(self, token: str | None) -> None:
        self._access_token = token or None

    def set_client_id(self, client_id: str | None) -> None:
        self._client_id = client_id or None

    def get_access_token(self) -> str | None:
        return self._access_token

    def get_client_id(self) -> str | None:
        return self._client_id

    @property
    def has_access_token(self) -> bool:
        return self._access_token is not None

    def __repr__(self) -> str:
        # Never print the token itself
        token_state = "set" if self.has_access_token else "unset"
        return f"CredentialState(access_token={token_state}, client_id={self._client_id!r})"
