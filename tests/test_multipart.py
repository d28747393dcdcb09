"""Test streamed multipart bodies and upload preconditions"""

import pytest

from soundcloud_api.client.multipart import (
    DEFAULT_CONTENT_TYPE,
    MAX_UPLOAD_SIZE,
    MultipartForm,
    check_upload_file,
)
from soundcloud_api.core.exceptions import ErrorKind, PreconditionError


class TestCheckUploadFile:
    """Test local upload file validation"""

    def test_returns_size(self, track_file):
        assert check_upload_file(track_file) == 64

    def test_missing_file(self, temp_dir):
        with pytest.raises(PreconditionError) as exc_info:
            check_upload_file(temp_dir / "missing.mp3")
        assert exc_info.value.kind is ErrorKind.PRECONDITION
        assert "could not be found" in exc_info.value.message

    def test_directory_is_rejected(self, temp_dir):
        with pytest.raises(PreconditionError):
            check_upload_file(temp_dir)

    def test_exactly_max_size_is_accepted(self, sparse_file):
        path = sparse_file("max.wav", MAX_UPLOAD_SIZE)
        assert check_upload_file(path) == MAX_UPLOAD_SIZE

    def test_one_byte_over_max_size_is_rejected(self, sparse_file):
        path = sparse_file("over.wav", MAX_UPLOAD_SIZE + 1)
        with pytest.raises(PreconditionError) as exc_info:
            check_upload_file(path)
        assert str(MAX_UPLOAD_SIZE) in exc_info.value.message
        assert exc_info.value.details["size"] == MAX_UPLOAD_SIZE + 1

    def test_custom_limit(self, track_file):
        with pytest.raises(PreconditionError):
            check_upload_file(track_file, max_size=10)


class TestMultipartForm:
    """Test multipart encoding"""

    def test_encoded_body(self, temp_dir):
        path = temp_dir / "song.txt"
        path.write_bytes(b"abc")
        form = MultipartForm(
            fields={"track[title]": "Demo"},
            files=[("track[asset_data]", path)],
            boundary="BOUNDARY"
        )

        body = b"".join(form.stream())

        assert body == (
            b"--BOUNDARY\r\n"
            b'Content-Disposition: form-data; name="track[title]"\r\n'
            b"\r\n"
            b"Demo\r\n"
            b"--BOUNDARY\r\n"
            b'Content-Disposition: form-data; name="track[asset_data]"; filename="song.txt"\r\n'
            b"Content-Type: text/plain\r\n"
            b"\r\n"
            b"abc\r\n"
            b"--BOUNDARY--\r\n"
        )
        assert len(form) == len(body)

    def test_length_matches_body_with_unicode_fields(self, track_file, artwork_file):
        form = MultipartForm(
            fields={"track[title]": "Café Müller", "track[description]": "ünïcödé"},
            files=[("track[asset_data]", track_file), ("track[artwork_data]", artwork_file)]
        )
        stream = form.stream()
        assert len(stream) == len(b"".join(stream))

    def test_headers(self, track_file):
        form = MultipartForm(files=[("track[asset_data]", track_file)], boundary="xyz")
        headers = form.headers()
        assert headers["Content-Type"] == "multipart/form-data; boundary=xyz"
        assert headers["Content-Length"] == str(len(form))

    def test_random_boundary(self, track_file):
        first = MultipartForm(files=[("f", track_file)])
        second = MultipartForm(files=[("f", track_file)])
        assert first.boundary != second.boundary

    def test_unknown_extension_uses_default_content_type(self, temp_dir):
        path = temp_dir / "data.unknownext"
        path.write_bytes(b"x")
        form = MultipartForm(files=[("f", path)])
        assert form.files[0].content_type == DEFAULT_CONTENT_TYPE

    def test_quotes_in_names_are_escaped(self, temp_dir):
        path = temp_dir / 'we"ird.txt'
        path.write_bytes(b"x")
        form = MultipartForm(files=[('na"me', path)], boundary="B")
        body = b"".join(form.stream())
        assert b'name="na%22me"' in body
        assert b'filename="we%22ird.txt"' in body

    def test_file_is_read_in_chunks(self, temp_dir):
        path = temp_dir / "song.bin"
        path.write_bytes(b"0123456789" * 10)
        form = MultipartForm(files=[("f", path)], chunk_size=16)
        chunks = list(form.stream())
        file_chunks = [chunk for chunk in chunks if chunk and set(chunk) <= set(b"0123456789")]
        assert max(len(chunk) for chunk in file_chunks) <= 16
        assert b"".join(file_chunks) == b"0123456789" * 10

    def test_missing_file_rejected_at_construction(self, temp_dir):
        with pytest.raises(PreconditionError):
            MultipartForm(files=[("f", temp_dir / "missing.mp3")])

    def test_invalid_chunk_size(self, track_file):
        with pytest.raises(ValueError):
            MultipartForm(files=[("f", track_file)], chunk_size=0)

    def test_progress_callback_sees_every_byte(self, track_file):
        seen = []
        form = MultipartForm(
            fields={"track[title]": "Demo"},
            files=[("track[asset_data]", track_file)],
            progress_callback=seen.append
        )
        b"".join(form.stream())
        assert sum(seen) == len(form)


class TestMultipartStream:
    """Test one-shot stream semantics"""

    def test_consumed_once(self, track_file):
        stream = MultipartForm(files=[("f", track_file)]).stream()
        list(stream)
        assert stream.consumed
        with pytest.raises(RuntimeError):
            iter(stream)

    def test_each_stream_call_is_fresh(self, track_file):
        form = MultipartForm(files=[("f", track_file)])
        assert b"".join(form.stream()) == b"".join(form.stream())

    def test_close_releases_open_file(self, track_file):
        stream = MultipartForm(files=[("f", track_file)], chunk_size=4).stream()
        iterator = iter(stream)
        next(iterator)
        next(iterator)
        stream.close()
        assert iterator.gi_frame is None

    def test_shrunk_file(self, track_file):
        form = MultipartForm(files=[("f", track_file)])
        track_file.write_bytes(b"short")
        with pytest.raises(PreconditionError) as exc_info:
            b"".join(form.stream())
        assert "changed size" in exc_info.value.message

    def test_grown_file_sends_validated_size(self, track_file):
        form = MultipartForm(files=[("f", track_file)])
        track_file.write_bytes(track_file.read_bytes() + b"extra")
        stream = form.stream()
        assert len(b"".join(stream)) == len(stream)
