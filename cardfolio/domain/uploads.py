"""Image upload rules shared by the API and the client uploader."""
from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
MIN_UPLOAD_BYTES = 100

RASTER_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "bmp")
VECTOR_EXTENSIONS = ("svg",)

_MAGIC = {
    "jpg": (b"\xFF\xD8\xFF",),
    "jpeg": (b"\xFF\xD8\xFF",),
    "png": (b"\x89PNG\r\n\x1a\n",),
    "gif": (b"GIF87a", b"GIF89a"),
    "bmp": (b"BM",),
}


class UploadRejected(ValueError):
    """Raised when a file fails validation; `message` is user facing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class ImageRules:
    allow_svg: bool = False
    max_bytes: int = MAX_UPLOAD_BYTES
    min_bytes: int = MIN_UPLOAD_BYTES

    @property
    def extensions(self) -> tuple[str, ...]:
        return RASTER_EXTENSIONS + (VECTOR_EXTENSIONS if self.allow_svg else ())

    def extension_message(self) -> str:
        if self.allow_svg:
            return "Only JPEG, PNG, GIF, WebP, BMP, and SVG images are allowed"
        return "Only JPEG, PNG, GIF, WebP, and BMP images are allowed"


RASTER_RULES = ImageRules()
LOGO_RULES = ImageRules(allow_svg=True)


def file_extension(filename: str | None) -> str:
    return os.path.splitext(filename or "")[1].lstrip(".").lower()


def guess_content_type(filename: str | None) -> str:
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or "application/octet-stream"


def validate_image(filename: str | None, content_type: str | None, size: int, rules: ImageRules = RASTER_RULES) -> str:
    """Check type, extension and size; return the normalized extension."""
    if not (content_type or "").lower().startswith("image/"):
        raise UploadRejected("Only image files are allowed")
    ext = file_extension(filename)
    if ext not in rules.extensions:
        raise UploadRejected(rules.extension_message())
    if size > rules.max_bytes:
        raise UploadRejected(f"File size exceeds {rules.max_bytes // (1024 * 1024)}MB limit")
    if size < rules.min_bytes:
        raise UploadRejected("File appears to be too small or corrupt")
    return ext


def has_valid_signature(data: bytes, ext: str) -> bool:
    if ext == "webp":
        return data[:4] == b"RIFF" and data[8:12] == b"WEBP"
    if ext == "svg":
        head = data[:2048].lstrip().lower()
        return head.startswith(b"<?xml") or head.startswith(b"<svg") or b"<svg" in head
    prefixes = _MAGIC.get(ext)
    if not prefixes:
        return False
    return any(data.startswith(prefix) for prefix in prefixes)
