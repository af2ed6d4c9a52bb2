"""
Multipart/form-data framing for the file-hosting endpoint.

The remote parser is strict about the exact layout, so the body is written
line by line instead of going through a generic multipart encoder:

    --<boundary>
    content-disposition: form-data; name="summary"

    <summary>
    --<boundary>                                   (once per label)
    content-disposition: form-data; name="label"

    <label>
    --<boundary>
    content-disposition: form-data; name="filename"; filename="<name>"
    Content-Type: application/octet-stream

    <file bytes>
    --<boundary>--

Every line ends with CRLF. Text is sent as ASCII.
"""
from typing import AsyncIterator, BinaryIO, Iterable

BOUNDARY = "CowMooCowMooCowCowCow"
CRLF = b"\r\n"
CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"
DEFAULT_CHUNK_SIZE = 8192


def encode_line(text: str) -> bytes:
    """ASCII-encode ``text`` (unencodable characters become ``?``) and add CRLF."""
    return text.encode("ascii", errors="replace") + CRLF


def _field_header(name: str, boundary: str) -> bytes:
    return (
        encode_line(f"--{boundary}")
        + encode_line(f'content-disposition: form-data; name="{name}"')
        + encode_line("")
    )


def build_head(
    summary: str,
    labels: Iterable[str],
    filename: str,
    boundary: str = BOUNDARY,
) -> bytes:
    """Everything that precedes the file bytes."""
    parts = [_field_header("summary", boundary), encode_line(summary)]
    for label in labels:
        parts.append(_field_header("label", boundary))
        parts.append(encode_line(label.strip()))

    parts.append(encode_line(f"--{boundary}"))
    parts.append(
        encode_line(f'content-disposition: form-data; name="filename"; filename="{filename}"')
    )
    parts.append(encode_line("Content-Type: application/octet-stream"))
    parts.append(encode_line(""))
    return b"".join(parts)


def build_tail(boundary: str = BOUNDARY) -> bytes:
    """Terminates the file part and closes the body."""
    return encode_line("") + encode_line(f"--{boundary}--")


class MultipartBody:
    """A streamable multipart body around one open file."""

    def __init__(
        self,
        summary: str,
        labels: Iterable[str],
        filename: str,
        fileobj: BinaryIO,
        file_size: int,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        boundary: str = BOUNDARY,
    ):
        self.head = build_head(summary, labels, filename, boundary)
        self.tail = build_tail(boundary)
        self._fileobj = fileobj
        self._file_size = file_size
        self._chunk_size = max(1, chunk_size)
        self.bytes_sent = 0

    @property
    def content_length(self) -> int:
        return len(self.head) + self._file_size + len(self.tail)

    async def stream(self) -> AsyncIterator[bytes]:
        yield self.head
        while True:
            chunk = self._fileobj.read(self._chunk_size)
            if not chunk:
                break
            self.bytes_sent += len(chunk)
            yield chunk
        yield self.tail
