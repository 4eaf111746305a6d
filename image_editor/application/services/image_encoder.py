"""Turns a selected file into a base64 payload and back."""

from __future__ import annotations

import base64
import binascii
from typing import BinaryIO, Union

from image_editor.domain.errors import FileReadError
from image_editor.domain.models import EncodedImage, SourceImage

_GENERIC_MIME_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


def sniff_mime_type(data: bytes) -> str | None:
    """Media type from the file's magic number, or None when unknown."""
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data.startswith(b"BM"):
        return "image/bmp"
    return None


def read_source_image(
    content: Union[bytes, str, BinaryIO],
    mime_type: str | None,
    filename: str | None = None,
) -> SourceImage:
    """`content` may be raw bytes, a binary stream or a `data:` URL string."""
    if isinstance(content, str):
        try:
            encoded = parse_data_url(content)
            data = decode_image(encoded)
        except ValueError as exc:
            raise FileReadError(f"invalid_data_url:{exc}") from exc
        mime_type = mime_type or encoded.mime_type
    elif isinstance(content, (bytes, bytearray)):
        data = bytes(content)
    else:
        try:
            data = content.read()
        except (OSError, ValueError) as exc:
            raise FileReadError(f"file_read_failed:{exc}") from exc

    if not data:
        raise FileReadError("empty_image")

    sniffed = sniff_mime_type(data)
    if sniffed is None:
        raise FileReadError("invalid_image_format")

    declared = (mime_type or "").strip().lower()
    if declared in _GENERIC_MIME_TYPES:
        declared = sniffed
    return SourceImage(data=data, mime_type=declared, filename=filename)


def encode_image(source: SourceImage) -> EncodedImage:
    return EncodedImage(
        data=base64.b64encode(source.data).decode("ascii"),
        mime_type=source.mime_type,
    )


def decode_image(encoded: EncodedImage) -> bytes:
    try:
        return base64.b64decode(encoded.data, validate=True)
    except (binascii.Error, TypeError, ValueError) as exc:
        raise ValueError("malformed_base64") from exc


def parse_data_url(value: str) -> EncodedImage:
    """`data:image/png;base64,AAAA` -> EncodedImage("AAAA", "image/png")."""
    header, sep, data = (value or "").partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("invalid_data_url")
    mime_type = header[len("data:"):-len(";base64")] or "application/octet-stream"
    return EncodedImage(data=data, mime_type=mime_type)
