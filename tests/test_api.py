"""Test SoundCloud API operations"""

import pytest

from soundcloud_api.api import SoundCloudAPI
from soundcloud_api.client.client import SoundCloudClient
from soundcloud_api.client.multipart import MAX_UPLOAD_SIZE
from soundcloud_api.core.exceptions import ApiError, ErrorKind, PreconditionError

BASE = "https://api.soundcloud.com/"


class TestEndpointMapping:
    """Test each operation builds the right request"""

    @pytest.mark.parametrize("call, method, path", [
        (lambda api: api.get_user(), "GET", "me"),
        (lambda api: api.get_user(7), "GET", "users/7"),
        (lambda api: api.get_track(42), "GET", "tracks/42"),
        (lambda api: api.get_track(42, "s-AbC"), "GET", "tracks/42?secret_token=s-AbC"),
        (lambda api: api.get_tracks(), "GET", "me/tracks"),
        (lambda api: api.get_tracks(7), "GET", "users/7/tracks"),
        (lambda api: api.get_stream_urls_for_track(42), "GET", "tracks/42/streams"),
        (lambda api: api.repost_track(42), "PUT", "e1/me/track_reposts/42"),
        (lambda api: api.like_track(42), "PUT", "e1/me/track_likes/42"),
        (lambda api: api.follow_user(7), "PUT", "me/followings/7"),
        (lambda api: api.unfollow_user(7), "DELETE", "me/followings/7"),
        (lambda api: api.get_followings(), "GET", "me/followings"),
        (lambda api: api.delete_track(42), "DELETE", "tracks/42"),
    ])
    def test_simple_operations(self, api, transport, call, method, path):
        call(api)
        request = transport.last_request
        assert request.method == method
        assert request.url == BASE + path
        assert request.body is None

    def test_search_queries_are_encoded(self, api, transport):
        api.search_tracks("ambient drone & more")
        assert transport.last_request.url == BASE + "tracks?q=ambient+drone+%26+more"

        api.search_playlists("lo-fi")
        assert transport.last_request.url == BASE + "playlists?q=lo-fi"

        api.search_users("dj/x")
        assert transport.last_request.url == BASE + "users?q=dj%2Fx"

    def test_resolve_url(self, api, transport):
        api.resolve_url("https://soundcloud.com/artist/track")
        assert transport.last_request.url == (
            BASE + "resolve?url=https%3A%2F%2Fsoundcloud.com%2Fartist%2Ftrack"
        )

    def test_comment_on_track(self, api, transport):
        api.comment_on_track(42, "great")
        request = transport.last_request
        assert request.method == "POST"
        assert request.url == BASE + "tracks/42/comments"
        assert request.body == b"comment%5Bbody%5D=great&comment%5Btimestamp%5D=0"

    def test_results_passed_through(self, api, transport):
        transport.queue(200, [{"id": 1, "title": "a"}])
        assert api.search_tracks("a") == [{"id": 1, "title": "a"}]


class TestOAuth:
    """Test token requests"""

    def test_authenticate(self, api, transport):
        api.set_client_id("client-1")
        transport.queue(200, {"access_token": "new", "refresh_token": "r"})

        result = api.authenticate("secret")

        request = transport.last_request
        assert request.method == "POST"
        assert request.url == BASE + "oauth2/token"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.body == b"client_id=client-1&client_secret=secret&grant_type=client_credentials"
        assert result["access_token"] == "new"

    def test_authenticate_does_not_store_token(self, api, transport):
        transport.queue(200, {"access_token": "new"})
        api.authenticate("secret")
        assert api.client.get_access_token() is None

    def test_refresh_token(self, api, transport):
        api.set_client_id("client-1")
        api.refresh_token("secret", "refresh-1")
        assert transport.last_request.body == (
            b"client_id=client-1&client_secret=secret"
            b"&grant_type=refresh_token&refresh_token=refresh-1"
        )

    def test_expired_token_is_not_retried(self, api, transport):
        api.set_access_token("expired")
        transport.queue(401, {"error": "invalid_token"})
        with pytest.raises(ApiError) as exc_info:
            api.get_user()
        assert exc_info.value.is_auth_error
        assert len(transport.requests) == 1


class TestStreamUrl:
    """Test stream URL resolution"""

    def test_without_token_returns_none_and_sends_nothing(self, api, transport):
        assert api.get_stream_url(5) is None
        assert transport.requests == []

    def test_with_token(self, api, transport):
        api.set_access_token("tok")
        transport.queue(302, b"", headers={"Location": "https://cdn.example/x.mp3"})

        assert api.get_stream_url(5) == "https://cdn.example/x.mp3"
        request = transport.last_request
        assert request.url == BASE + "tracks/5/stream"
        assert request.allow_redirects is False
        assert request.headers["Authorization"] == "OAuth tok"


class TestUploadTrack:
    """Test track uploads"""

    def test_upload_fields(self, api, transport, track_file, artwork_file):
        api.set_access_token("tok")
        transport.queue(201, {"id": 99, "title": "Demo"})

        result = api.upload_track("Demo", track_file, "A demo", artwork_file)

        request = transport.last_request
        assert request.method == "POST"
        assert request.url == BASE + "tracks"
        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert request.headers["Authorization"] == "OAuth tok"
        for name in (b"track[title]", b"track[asset_data]", b"track[description]",
                     b"track[artwork_data]"):
            assert b'name="' + name + b'"' in request.body
        assert b'filename="song.mp3"' in request.body
        assert b'filename="cover.jpg"' in request.body
        assert track_file.read_bytes() in request.body
        assert result == {"id": 99, "title": "Demo"}

    def test_upload_without_artwork(self, api, transport, track_file):
        api.upload_track("Demo", track_file)
        assert b"track[artwork_data]" not in transport.last_request.body
        assert b'name="track[description]"\r\n\r\n\r\n' in transport.last_request.body

    def test_missing_track_file(self, api, transport, temp_dir):
        with pytest.raises(PreconditionError) as exc_info:
            api.upload_track("Demo", temp_dir / "missing.mp3")
        assert exc_info.value.kind is ErrorKind.PRECONDITION
        assert transport.requests == []

    def test_missing_artwork_file(self, api, transport, track_file, temp_dir):
        with pytest.raises(PreconditionError):
            api.upload_track("Demo", track_file, artwork_file_path=temp_dir / "missing.jpg")
        assert transport.requests == []

    def test_oversize_file(self, api, transport, sparse_file):
        path = sparse_file("huge.wav", MAX_UPLOAD_SIZE + 1)
        with pytest.raises(PreconditionError):
            api.upload_track("Huge", path)
        assert transport.requests == []

    def test_exactly_max_size_is_sent(self, lazy_transport, sparse_file):
        api = SoundCloudAPI(SoundCloudClient(transport=lazy_transport))
        path = sparse_file("max.wav", MAX_UPLOAD_SIZE)

        api.upload_track("Max", path)

        request = lazy_transport.last_request
        assert request.body_length > MAX_UPLOAD_SIZE
        assert request.headers["Content-Length"] == str(request.body_length)

    def test_progress_callback(self, api, transport, track_file):
        seen = []
        api.upload_track("Demo", track_file, progress_callback=seen.append)
        assert sum(seen) == len(transport.last_request.body)


class TestDefaults:
    """Test default wiring"""

    def test_default_client(self):
        api = SoundCloudAPI()
        assert isinstance(api.client, SoundCloudClient)

    def test_set_credentials(self, api):
        api.set_access_token("tok")
        api.set_client_id("client-1")
        assert api.client.get_access_token() == "tok"
        assert api.client.get_client_id() == "client-1"
