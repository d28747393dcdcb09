"""
Streamed multipart/form-data bodies for track uploads.

Uploads may be up to 500 MiB, so the body is never assembled in memory.
A MultipartForm validates its files up front (before anything touches the
network), computes the exact encoded length from the file sizes, and
produces a MultipartStream: a one-shot iterable of byte chunks that reads
each file lazily while the transport sends it.

Wire layout (RFC 7578), one block per part:

    --<boundary>\\r\\n
    Content-Disposition: form-data; name="track[asset_data]"; filename="song.mp3"\\r\\n
    Content-Type: audio/mpeg\\r\\n
    \\r\\n
    <file bytes>\\r\\n
    ...
    --<boundary>--\\r\\n

Text fields come first, in insertion order, followed by file parts in the
order given.

Usage:
    form = MultipartForm(
        fields={"track[title]": "Demo"},
        files=[("track[asset_data]", "demo.mp3")]
    )
    client.api_request("POST", "tracks", body=form)
"""

import mimetypes
import uuid
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from soundcloud_api.core.exceptions import PreconditionError


# Largest file the API accepts for a single upload (500 MiB)
MAX_UPLOAD_SIZE = 500 * 1024 * 1024

# Bytes read from disk per chunk while streaming a file part
DEFAULT_CHUNK_SIZE = 64 * 1024

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CRLF = b"\r\n"


@dataclass(frozen=True)
class FilePart:
    """
    A validated file part.

    Attributes:
        name: Form field name, e.g. "track[asset_data]".
        path: Absolute path of the file.
        size: File size in bytes at validation time.
        content_type: MIME type sent in the part headers.
    """
    name: str
    path: Path
    size: int
    content_type: str


def check_upload_file(path: str | Path, max_size: int = MAX_UPLOAD_SIZE) -> int:
    """
    Verify a file can be uploaded.

    Args:
        path: File to check.
        max_size: Largest accepted size in bytes (inclusive).

    Returns:
        The file size in bytes.

    Raises:
        PreconditionError: If the path is not an existing regular file,
                           or the file is larger than max_size.
    """
    file_path = Path(path)

    if not file_path.is_file():
        raise PreconditionError(
            f"The file '{file_path}' could not be found",
            details={"file_path": str(file_path)}
        )

    size = file_path.stat().st_size
    if size > max_size:
        raise PreconditionError(
            f"The file '{file_path}' should not exceed {max_size} bytes, "
            f"current size is {size} bytes",
            details={"file_path": str(file_path), "size": size, "max_size": max_size}
        )

    return size


def _quote(value: str) -> str:
    # Escape characters that would break a quoted header parameter
    return value.replace("\r", "%0D").replace("\n", "%0A").replace('"', "%22")


class MultipartStream:
    """
    One-shot iterable of encoded multipart chunks.

    len() is the exact number of bytes the iteration will produce, which
    lets the transport send a Content-Length header instead of chunked
    transfer encoding.

    The stream can be iterated once. close() releases the file currently
    being read, if any; the executor calls it on every exit path.
    """

    def __init__(self, chunks: Iterator[bytes], length: int) -> None:
        self._chunks = chunks
        self._length = length
        self._consumed = False

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[bytes]:
        if self._consumed:
            raise RuntimeError("Multipart stream can only be consumed once")
        self._consumed = True
        return self._chunks

    @property
    def consumed(self) -> bool:
        return self._consumed

    def close(self) -> None:
        # Closing the generator runs its pending `with` blocks
        self._chunks.close()

    def __enter__(self) -> "MultipartStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class MultipartForm:
    """
    A multipart/form-data payload made of text fields and file parts.

    Files are validated when the form is built, so a missing or oversize
    file is reported before any request is attempted.

    Attributes:
        fields: Text fields as (name, value) pairs.
        files: Validated FilePart entries.
        boundary: Part delimiter.

    Args:
        fields: Text fields. Values are converted with str().
        files: (field_name, file_path) pairs.
        boundary: Explicit boundary, mostly useful in tests.
                  Defaults to a random hex string.
        chunk_size: Bytes read from disk per chunk.
        max_file_size: Size limit applied to every file.
        progress_callback: Called with the byte count of each chunk as it
                           is handed to the transport.

    Raises:
        PreconditionError: If any file is missing or too large.
    """

    def __init__(
        self,
        fields: Mapping[str, object] | None = None,
        files: Sequence[tuple[str, str | Path]] = (),
        boundary: str | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_file_size: int = MAX_UPLOAD_SIZE,
        progress_callback: Callable[[int], None] | None = None
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be a positive integer")

        self.fields = [(name, str(value)) for name, value in (fields or {}).items()]
        self.files = [self._file_part(name, path, max_file_size) for name, path in files]
        self.boundary = boundary or uuid.uuid4().hex
        self.chunk_size = chunk_size
        self.progress_callback = progress_callback

    @staticmethod
    def _file_part(name: str, path: str | Path, max_file_size: int) -> FilePart:
        size = check_upload_file(path, max_file_size)
        resolved = Path(path).resolve()
        content_type = mimetypes.guess_type(resolved.name)[0] or DEFAULT_CONTENT_TYPE
        return FilePart(name=name, path=resolved, size=size, content_type=content_type)

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def headers(self) -> dict[str, str]:
        """Content-Type (with boundary) and exact Content-Length."""
        return {
            "Content-Type": self.content_type,
            "Content-Length": str(len(self)),
        }

    def _part_header(self, name: str, file_part: FilePart | None = None) -> bytes:
        disposition = f'form-data; name="{_quote(name)}"'
        lines = [f"--{self.boundary}"]
        if file_part is None:
            lines.append(f"Content-Disposition: {disposition}")
        else:
            lines.append(
                f'Content-Disposition: {disposition}; filename="{_quote(file_part.path.name)}"'
            )
            lines.append(f"Content-Type: {file_part.content_type}")
        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")

    def _closing(self) -> bytes:
        return f"--{self.boundary}--\r\n".encode("utf-8")

    def __len__(self) -> int:
        length = len(self._closing())
        for name, value in self.fields:
            length += len(self._part_header(name)) + len(value.encode("utf-8")) + len(CRLF)
        for part in self.files:
            length += len(self._part_header(part.name, part)) + part.size + len(CRLF)
        return length

    def stream(self) -> MultipartStream:
        """
        Create a fresh one-shot stream over the encoded body.

        Each call returns a new stream; files are opened only when the
        stream reaches their part.
        """
        return MultipartStream(self._iter_chunks(), len(self))

    def _emit(self, chunk: bytes) -> bytes:
        if self.progress_callback is not None:
            self.progress_callback(len(chunk))
        return chunk

    def _iter_chunks(self) -> Iterator[bytes]:
        for name, value in self.fields:
            yield self._emit(self._part_header(name) + value.encode("utf-8") + CRLF)

        for part in self.files:
            yield self._emit(self._part_header(part.name, part))
            yield from self._iter_file(part)
            yield self._emit(CRLF)

        yield self._emit(self._closing())

    def _iter_file(self, part: FilePart) -> Iterator[bytes]:
        try:
            handle = open(part.path, "rb")
        except OSError as e:
            raise PreconditionError(
                f"The file '{part.path}' could not be opened: {e}",
                details={"file_path": str(part.path), "original_error": str(e)}
            ) from e

        with handle:
            # Send exactly the validated size so Content-Length stays correct
            remaining = part.size
            while remaining > 0:
                try:
                    chunk = handle.read(min(self.chunk_size, remaining))
                except OSError as e:
                    raise PreconditionError(
                        f"The file '{part.path}' could not be read: {e}",
                        details={"file_path": str(part.path), "original_error": str(e)}
                    ) from e
                if not chunk:
                    raise PreconditionError(
                        f"The file '{part.path}' changed size during upload",
                        details={"file_path": str(part.path), "expected_size": part.size}
                    )
                remaining -= len(chunk)
                yield self._emit(chunk)
