"""Filename helpers for downloadable images."""

from __future__ import annotations
import os
import re
import unicodedata

_EXT_BY_MIME = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
}


def safe_filename(name: str, default: str = "image.png") -> str:
    base, ext = os.path.splitext((name or default).lower())
    base = ''.join(c for c in unicodedata.normalize('NFD', base) if unicodedata.category(c) != 'Mn')
    base = re.sub(r'[^a-z0-9]+', '_', base).strip('_') or "image"
    ext = re.sub(r'[^.a-z0-9]', '', ext) or ".png"
    return f"{base}{ext}"


def extension_for_mime(mime_type: str | None) -> str:
    return _EXT_BY_MIME.get((mime_type or "").lower(), ".png")


def edited_filename(original: str | None, mime_type: str | None) -> str:
    """`holiday.jpg` + `image/png` -> `holiday_edited.png`."""
    base, _ = os.path.splitext(safe_filename(original or "image.png"))
    return f"{base}_edited{extension_for_mime(mime_type)}"
