"""
SoundCloud API operations.

SoundCloudAPI maps each supported API operation onto a path, an HTTP
verb and a payload, and delegates execution to a SoundCloudClient. It
holds no state of its own beyond the client; every failure is a
SoundCloudAPIError raised by the client (or a PreconditionError raised
while preparing an upload) and is passed through unchanged.

API reference: https://developers.soundcloud.com/docs/api/reference

Usage:
    from soundcloud_api import SoundCloudAPI

    api = SoundCloudAPI()
    api.set_client_id("my-client-id")
    token = api.authenticate("my-client-secret")
    api.set_access_token(token["access_token"])

    track = api.get_track(42)
    results = api.search_tracks("ambient drone")
"""

from collections.abc import Callable
from pathlib import Path
from urllib.parse import quote, quote_plus, urlencode

from soundcloud_api.client.client import SoundCloudClient
from soundcloud_api.client.models import Payload
from soundcloud_api.client.multipart import MAX_UPLOAD_SIZE, MultipartForm

TOKEN_PATH = "oauth2/token"

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class SoundCloudAPI:
    """
    One method per SoundCloud API operation.

    Attributes:
        client: The SoundCloudClient requests are delegated to.

    Args:
        client: Client to use. Defaults to a new SoundCloudClient with the
                default transport and base URL.
    """

    def __init__(self, client: SoundCloudClient | None = None) -> None:
        self.client = client if client is not None else SoundCloudClient()

    def set_access_token(self, access_token: str | None) -> None:
        self.client.set_access_token(access_token)

    def set_client_id(self, client_id: str | None) -> None:
        self.client.set_client_id(client_id)

    # =========================================================================
    # Users
    # =========================================================================

    def get_user(self, user_id: int | None = None) -> Payload:
        """Get a user, or the authenticated user when user_id is None."""
        url = "me" if user_id is None else f"users/{int(user_id)}"
        return self.client.api_request("GET", url)

    def follow_user(self, user_id: int) -> Payload:
        return self.client.api_request("PUT", f"me/followings/{int(user_id)}")

    def unfollow_user(self, user_id: int) -> Payload:
        return self.client.api_request("DELETE", f"me/followings/{int(user_id)}")

    def get_followings(self) -> Payload:
        """List the users the authenticated user follows."""
        return self.client.api_request("GET", "me/followings")

    # =========================================================================
    # Tracks
    # =========================================================================

    def get_track(self, track_id: int, secret_token: str | None = None) -> Payload:
        """
        Get a track.

        Args:
            track_id: Track ID.
            secret_token: Secret token of a private track shared by link.
        """
        url = f"tracks/{int(track_id)}"
        if secret_token is not None:
            url = f"{url}?{urlencode({'secret_token': secret_token})}"
        return self.client.api_request("GET", url)

    def get_tracks(self, user_id: int | None = None) -> Payload:
        """List the tracks of a user, or of the authenticated user."""
        url = "me/tracks" if user_id is None else f"users/{int(user_id)}/tracks"
        return self.client.api_request("GET", url)

    def get_stream_urls_for_track(self, track_id: int) -> Payload:
        return self.client.api_request("GET", f"tracks/{int(track_id)}/streams")

    def get_stream_url(self, track_id: int) -> str | None:
        """
        Resolve the signed media URL of a track.

        Returns:
            The redirect target of tracks/{id}/stream, or None when no
            access token is set. In that case no request is made: this
            endpoint is not attempted unauthenticated, unlike the others.
        """
        if not self.client.get_access_token():
            return None
        return self.client.url_request("GET", f"tracks/{int(track_id)}/stream")

    def repost_track(self, track_id: int) -> Payload:
        return self.client.api_request("PUT", f"e1/me/track_reposts/{int(track_id)}")

    def like_track(self, track_id: int) -> Payload:
        return self.client.api_request("PUT", f"e1/me/track_likes/{int(track_id)}")

    def comment_on_track(self, track_id: int, comment: str) -> Payload:
        """Post a comment at timestamp 0 of a track."""
        data = {
            "comment[body]": comment,
            "comment[timestamp]": 0,
        }
        return self.client.api_request("POST", f"tracks/{int(track_id)}/comments", body=data)

    def upload_track(
        self,
        title: str,
        track_file_path: str | Path,
        description: str = "",
        artwork_file_path: str | Path = "",
        progress_callback: Callable[[int], None] | None = None
    ) -> Payload:
        """
        Upload a new track.

        The audio file (and artwork, when given) must exist and be at most
        500 MiB. Both are checked before any request is made; the body is
        then streamed from disk.

        Args:
            title: Track title.
            track_file_path: Audio file to upload.
            description: Track description.
            artwork_file_path: Optional artwork image; empty means none.
            progress_callback: Called with the size of each body chunk
                               as it is sent.

        Raises:
            PreconditionError: If a file is missing or larger than 500 MiB.
        """
        files: list[tuple[str, str | Path]] = [("track[asset_data]", track_file_path)]
        if artwork_file_path:
            files.append(("track[artwork_data]", artwork_file_path))

        form = MultipartForm(
            fields={
                "track[title]": title,
                "track[description]": description,
            },
            files=files,
            max_file_size=MAX_UPLOAD_SIZE,
            progress_callback=progress_callback
        )

        return self.client.api_request("POST", "tracks", body=form)

    def delete_track(self, track_id: int) -> Payload:
        return self.client.api_request("DELETE", f"tracks/{int(track_id)}")

    # =========================================================================
    # Search and resolve
    # =========================================================================

    def resolve_url(self, url: str) -> Payload:
        """Look up the API resource behind a soundcloud.com URL."""
        return self.client.api_request("GET", f"resolve?url={quote(url, safe='')}")

    def search_tracks(self, query: str) -> Payload:
        return self.client.api_request("GET", f"tracks?q={quote_plus(query)}")

    def search_playlists(self, query: str) -> Payload:
        return self.client.api_request("GET", f"playlists?q={quote_plus(query)}")

    def search_users(self, query: str) -> Payload:
        return self.client.api_request("GET", f"users?q={quote_plus(query)}")

    # =========================================================================
    # OAuth
    # =========================================================================

    def authenticate(self, client_secret: str) -> Payload:
        """
        Obtain an access token with the client credentials grant.

        The token is returned, not stored; call set_access_token() with
        its "access_token" to use it.
        """
        body = urlencode({
            "client_id": self.client.get_client_id() or "",
            "client_secret": client_secret,
            "grant_type": "client_credentials",
        })
        return self.client.api_request("POST", TOKEN_PATH, FORM_HEADERS, body)

    def refresh_token(self, client_secret: str, refresh_token: str) -> Payload:
        """Exchange a refresh token for a new access token."""
        body = urlencode({
            "client_id": self.client.get_client_id() or "",
            "client_secret": client_secret,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        })
        return self.client.api_request("POST", TOKEN_PATH, FORM_HEADERS, body)
