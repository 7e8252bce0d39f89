"""
Image cropping for avatars and logos.

The crop rectangle is expressed in the coordinates of the image as it is
displayed to the user. Source pixels are picked by scaling that rectangle by
natural/displayed size, and the output is sized ``crop * pixel_ratio`` so a
high density screen gets a sharper result.
"""
from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

JPEG_QUALITY = 90


class CropError(ValueError):
    pass


@dataclass(frozen=True)
class CropBox:
    x: float
    y: float
    width: float
    height: float

    def clamp(self, max_width: float, max_height: float) -> "CropBox":
        x = min(max(self.x, 0.0), max_width)
        y = min(max(self.y, 0.0), max_height)
        width = min(max(self.width, 0.0), max_width - x)
        height = min(max(self.height, 0.0), max_height - y)
        return CropBox(x, y, width, height)

    def zoom(self, factor: float) -> "CropBox":
        """Shrink (factor > 1) or grow the box around its center."""
        if factor <= 0:
            raise CropError("Zoom factor must be positive")
        width = self.width / factor
        height = self.height / factor
        cx = self.x + self.width / 2
        cy = self.y + self.height / 2
        return CropBox(cx - width / 2, cy - height / 2, width, height)


def initial_crop(displayed_width: float, displayed_height: float) -> CropBox:
    """Largest centered square."""
    side = min(displayed_width, displayed_height)
    return CropBox((displayed_width - side) / 2, (displayed_height - side) / 2, side, side)


def load_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise CropError("Invalid image file") from exc
    return ImageOps.exif_transpose(image)


def rotate(image: Image.Image, degrees: int) -> Image.Image:
    """Rotate clockwise in 90 degree steps."""
    steps = (int(degrees) // 90) % 4
    if not steps:
        return image
    return image.rotate(-90 * steps, expand=True)


def output_size(crop: CropBox, pixel_ratio: float = 1.0) -> tuple[int, int]:
    return max(1, round(crop.width * pixel_ratio)), max(1, round(crop.height * pixel_ratio))


def crop_image(
    image: Image.Image,
    crop: CropBox,
    displayed_size: tuple[float, float] | None = None,
    *,
    pixel_ratio: float = 1.0,
    zoom: float = 1.0,
) -> Image.Image:
    """Zoom picks a smaller source region around the crop center; the output size is unchanged."""
    natural_w, natural_h = image.size
    displayed_w, displayed_h = displayed_size or (natural_w, natural_h)
    if displayed_w <= 0 or displayed_h <= 0:
        raise CropError("Displayed size must be positive")
    crop = crop.clamp(displayed_w, displayed_h)
    if crop.width <= 0 or crop.height <= 0:
        raise CropError("Crop area is empty")
    size = output_size(crop, pixel_ratio)
    if zoom != 1.0:
        crop = crop.zoom(zoom).clamp(displayed_w, displayed_h)
    scale_x = natural_w / displayed_w
    scale_y = natural_h / displayed_h
    box = (
        crop.x * scale_x,
        crop.y * scale_y,
        (crop.x + crop.width) * scale_x,
        (crop.y + crop.height) * scale_y,
    )
    return image.resize(size, Image.LANCZOS, box=box)


def crop_to_jpeg(
    data: bytes,
    crop: CropBox,
    displayed_size: tuple[float, float] | None = None,
    *,
    pixel_ratio: float = 1.0,
    rotation: int = 0,
    zoom: float = 1.0,
    quality: int = JPEG_QUALITY,
) -> bytes:
    """Crop ``data`` and encode the selected region as JPEG."""
    image = rotate(load_image(data), rotation)
    region = crop_image(image, crop, displayed_size, pixel_ratio=pixel_ratio, zoom=zoom).convert("RGB")
    buffer = io.BytesIO()
    region.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()
