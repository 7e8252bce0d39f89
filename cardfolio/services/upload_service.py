"""
Store uploaded images under UPLOADS_DIR/<section>/<user id>/ and hand back
their public path. Removal only touches files in the acting user's folder.

Raster images are re-encoded with Pillow (EXIF orientation applied, bounded
size) so whatever reaches disk is a clean image; SVG logos are stored as sent.
"""

from __future__ import annotations

import io
import logging
import os
import re
import secrets
import time
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from cardfolio.core.config import get_settings
from cardfolio.domain.uploads import (
    RASTER_RULES,
    ImageRules,
    UploadRejected,
    has_valid_signature,
    validate_image,
)

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads/"
DEFAULT_MAX_SIZE = (1600, 1600)
_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")


class UploadService:
    def __init__(self, uploads_dir: Optional[str] = None):
        self._uploads_dir = uploads_dir

    @property
    def uploads_dir(self) -> str:
        return os.path.abspath(self._uploads_dir or get_settings().uploads_dir)

    @property
    def max_bytes(self) -> int:
        return get_settings().max_upload_bytes

    def _unique_name(self, section: str, ext: str) -> str:
        return f"{section}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}.{ext}"

    def _reencode(self, data: bytes, ext: str, max_size: tuple[int, int]) -> tuple[bytes, str]:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise UploadRejected("Invalid image file") from exc
        image = ImageOps.exif_transpose(image)
        image.thumbnail(max_size, Image.LANCZOS)
        buffer = io.BytesIO()
        if ext == "png" or image.mode in ("RGBA", "LA", "P"):
            image.save(buffer, format="PNG", optimize=True)
            return buffer.getvalue(), "png"
        image.convert("RGB").save(buffer, format="JPEG", quality=85, optimize=True)
        return buffer.getvalue(), "jpg"

    def store_image(
        self,
        section: str,
        owner_id: str,
        filename: str,
        content_type: str,
        data: bytes,
        *,
        rules: ImageRules = RASTER_RULES,
        max_size: tuple[int, int] = DEFAULT_MAX_SIZE,
    ) -> str:
        """Validate, normalize and write an image; returns `/uploads/<section>/<owner_id>/<name>`."""
        if not _SAFE_SEGMENT.match(owner_id or ""):
            raise UploadRejected("Invalid upload owner")
        if rules.max_bytes != self.max_bytes:
            rules = ImageRules(allow_svg=rules.allow_svg, max_bytes=self.max_bytes, min_bytes=rules.min_bytes)
        ext = validate_image(filename, content_type, len(data), rules)
        if not has_valid_signature(data, ext):
            raise UploadRejected("Invalid image file")
        if ext == "svg":
            payload, out_ext = data, "svg"
        else:
            payload, out_ext = self._reencode(data, ext, max_size)
        name = self._unique_name(section, out_ext)
        dest_dir = os.path.join(self.uploads_dir, section, owner_id)
        os.makedirs(dest_dir, exist_ok=True)
        with open(os.path.join(dest_dir, name), "wb") as fh:
            fh.write(payload)
        logger.info("stored upload %s/%s/%s (%d bytes)", section, owner_id, name, len(payload))
        return f"{PUBLIC_PREFIX}{section}/{owner_id}/{name}"

    def local_path(self, public_path: Optional[str]) -> Optional[str]:
        """Map a `/uploads/...` path back to disk, refusing anything outside the directory."""
        if not public_path or not public_path.startswith(PUBLIC_PREFIX):
            return None
        relative = public_path[len(PUBLIC_PREFIX):].split("?", 1)[0]
        candidate = os.path.abspath(os.path.join(self.uploads_dir, relative))
        if not candidate.startswith(self.uploads_dir + os.sep):
            return None
        return candidate

    def owns(self, public_path: Optional[str], owner_id: str) -> bool:
        """True when the file sits in `<section>/<owner_id>/` under the uploads dir."""
        path = self.local_path(public_path)
        if not path or not owner_id:
            return False
        parts = os.path.relpath(path, self.uploads_dir).split(os.sep)
        return len(parts) == 3 and parts[1] == owner_id

    def remove(self, public_path: Optional[str], owner_id: str) -> bool:
        """Delete an upload of ``owner_id``; other users' files are left alone."""
        if not public_path:
            return False
        if not self.owns(public_path, owner_id):
            logger.warning("refusing to remove %s for user %s", public_path, owner_id)
            return False
        path = self.local_path(public_path)
        if not os.path.isfile(path):
            return False
        try:
            os.remove(path)
        except OSError as exc:
            logger.warning("could not remove upload %s: %s", path, exc)
            return False
        return True
