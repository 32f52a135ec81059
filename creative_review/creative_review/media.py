"""
Media utilities for turning uploaded creative files into data URIs and back.
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import InvalidMediaError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(;[\w.+-]+=[\w.+-]+)*);base64,(?P<data>.*)$", re.DOTALL)

# (offset, signature, mime type)
_MAGIC_SIGNATURES = (
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"ID3", "audio/mpeg"),
    (0, b"\xff\xfb", "audio/mpeg"),
    (0, b"OggS", "audio/ogg"),
    (0, b"fLaC", "audio/flac"),
    (0, b"\x1aE\xdf\xa3", "video/webm"),
)


@dataclass(frozen=True)
class MediaPayload:
    """Decoded data URI."""

    mime_type: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)


def sniff_mime_type(data: bytes) -> Optional[str]:
    """Guess a MIME type from leading magic bytes."""
    for offset, signature, mime in _MAGIC_SIGNATURES:
        if data[offset:offset + len(signature)] == signature:
            return mime
    # RIFF containers carry their format 8 bytes in
    if data[:4] == b"RIFF":
        if data[8:12] == b"WEBP":
            return "image/webp"
        if data[8:12] == b"WAVE":
            return "audio/wav"
    # ISO base media (mp4/mov/m4a): 'ftyp' box at offset 4
    if data[4:8] == b"ftyp":
        brand = data[8:12]
        if brand in (b"M4A ", b"M4B "):
            return "audio/mp4"
        if brand == b"qt  ":
            return "video/quicktime"
        return "video/mp4"
    return None


def guess_mime_type(filename: Optional[str], data: Optional[bytes] = None) -> str:
    """Resolve a MIME type from the file name, falling back to magic bytes."""
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    if data:
        sniffed = sniff_mime_type(data)
        if sniffed:
            return sniffed
    return DEFAULT_MIME_TYPE


def media_format_for_mime(mime_type: Optional[str]) -> str:
    """Map a MIME type onto the asset format shown in the library."""
    mime = (mime_type or "").lower()
    if mime.startswith("video"):
        return "Video"
    if mime.startswith("image"):
        return "Image"
    return "Audio"


def encode_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as ``data:<mime>;base64,<payload>``."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded}"


def parse_data_uri(uri: str) -> MediaPayload:
    """
    Decode a base64 data URI.

    Raises InvalidMediaError when the string is not a base64 data URI or the
    payload does not decode.
    """
    if not isinstance(uri, str) or not uri.startswith("data:"):
        raise InvalidMediaError("Media must be a data URI ('data:<mimetype>;base64,<data>').")
    match = _DATA_URI_RE.match(uri)
    if not match:
        raise InvalidMediaError("Media data URI must declare a MIME type and use base64 encoding.")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidMediaError(f"Media payload is not valid base64: {exc}") from exc
    if not data:
        raise InvalidMediaError("Media payload is empty.")
    return MediaPayload(mime_type=match.group("mime").lower(), data=data)


def file_to_data_uri(path: str | Path, mime_type: Optional[str] = None) -> str:
    """Read a local file and encode it as a data URI."""
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(f"Media file not found: {src}")
    data = src.read_bytes()
    resolved = mime_type or guess_mime_type(src.name, data)
    logger.debug("Encoded %s (%s, %d bytes)", src, resolved, len(data))
    return encode_data_uri(data, resolved)


def image_file_to_data_uri(path: str | Path) -> str:
    """Encode a test image: jpg/jpeg as image/jpeg, everything else as image/png."""
    suffix = Path(path).suffix.lower().lstrip(".")
    mime_type = "image/jpeg" if suffix in ("jpg", "jpeg") else "image/png"
    return file_to_data_uri(path, mime_type=mime_type)


def check_upload_size(size_bytes: int, max_mb: int) -> None:
    """Reject uploads larger than the configured limit."""
    limit = max_mb * 1024 * 1024
    if size_bytes > limit:
        raise InvalidMediaError(
            f"Upload is {size_bytes / (1024 * 1024):.1f} MB; the limit is {max_mb} MB."
        )


__all__ = [
    "MediaPayload",
    "check_upload_size",
    "encode_data_uri",
    "file_to_data_uri",
    "guess_mime_type",
    "image_file_to_data_uri",
    "media_format_for_mime",
    "parse_data_uri",
    "sniff_mime_type",
]
