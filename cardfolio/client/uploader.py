"""
Image upload helpers. Files are checked locally before any request so an
oversized or non-image file never leaves the machine.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from cardfolio.domain.cropper import CropBox, crop_to_jpeg
from cardfolio.domain.uploads import RASTER_RULES, ImageRules, UploadRejected, guess_content_type, validate_image

from .exceptions import LOGIN_REQUIRED_MESSAGE, ApiError

logger = logging.getLogger(__name__)

URL_KEYS = ("imageUrl", "logoUrl", "profilePicture", "url")


@dataclass(frozen=True)
class LocalFile:
    filename: str
    data: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.data)


def read_local_file(path: str, content_type: Optional[str] = None) -> LocalFile:
    with open(path, "rb") as fh:
        data = fh.read()
    name = os.path.basename(path)
    return LocalFile(name, data, content_type or guess_content_type(name))


def cropped(
    file: LocalFile,
    crop: CropBox,
    displayed_size: Optional[tuple[float, float]] = None,
    *,
    pixel_ratio: float = 1.0,
    rotation: int = 0,
    zoom: float = 1.0,
) -> LocalFile:
    """Crop ``file`` to a JPEG ready for upload."""
    stem = os.path.splitext(file.filename)[0] or "image"
    data = crop_to_jpeg(file.data, crop, displayed_size, pixel_ratio=pixel_ratio, rotation=rotation, zoom=zoom)
    return LocalFile(f"{stem}.jpg", data, "image/jpeg")


def _uploaded_path(envelope) -> Optional[str]:
    sources = [envelope.data if isinstance(envelope.data, dict) else {}, envelope.model_extra or {}]
    for source in sources:
        for key in URL_KEYS:
            value = source.get(key)
            if isinstance(value, str) and value:
                return value
    return None


class ImageUploader:
    def __init__(self, session, path: str, field: str, rules: ImageRules = RASTER_RULES):
        self.session = session
        self.path = path
        self.field = field
        self.rules = rules

    def check(self, file: LocalFile) -> Optional[str]:
        """Return the rejection message, or None when the file may be sent."""
        try:
            validate_image(file.filename, file.content_type, file.size, self.rules)
        except UploadRejected as exc:
            return exc.message
        return None

    def upload(self, file: LocalFile) -> Optional[str]:
        """Send ``file``; returns the server-relative path or None after notifying."""
        notifier = self.session.notifier
        problem = self.check(file)
        if problem:
            notifier.error(problem)
            return None
        if not self.session.token:
            notifier.error(LOGIN_REQUIRED_MESSAGE)
            return None
        try:
            envelope = self.session.api.upload(self.path, self.field, file.filename, file.data, file.content_type)
        except ApiError as exc:
            logger.info("upload to %s failed: %s", self.path, exc)
            notifier.error(exc.message or "Failed to upload image")
            return None
        path = _uploaded_path(envelope)
        if not path:
            notifier.error("Upload response did not include a file path")
            return None
        notifier.success(envelope.message or "Image uploaded successfully")
        return path
