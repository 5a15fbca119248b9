"""Image preprocessing utilities.

Preprocessing photos before OCR improves recognition on phone shots of
receipts and recipe cards. The functions in this module apply the EXIF
orientation, convert to grayscale and shrink very large images so the
longest edge fits a configured size. Pillow is used as the imaging
backend.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)


def _apply_exif_orientation(img: Image.Image) -> Tuple[Image.Image, bool]:  # pragma: no cover - visual correctness
    """Return a new image with EXIF orientation applied if needed.

    Returns (image, applied_flag).
    """
    transposed = ImageOps.exif_transpose(img)
    if transposed is None or transposed is img:
        return img, False
    return transposed, True


def preprocess_image(image_data: bytes, max_size: int = 2000) -> bytes:
    """Preprocess an image for OCR.

    This function opens the image, applies EXIF orientation, converts it
    to grayscale and resizes the longest edge to ``max_size`` pixels
    while maintaining aspect ratio. Data that Pillow cannot decode is
    returned unchanged so the OCR engine can report on it.

    :param image_data: Raw image bytes
    :param max_size: Maximum size of the longest edge in pixels
    :returns: Processed image bytes in PNG format
    """
    try:
        with Image.open(BytesIO(image_data)) as img:
            img, _applied = _apply_exif_orientation(img)
            img = img.convert("L")
            width, height = img.size
            max_dim = max(width, height)
            if max_dim > max_size:
                scale = max_size / float(max_dim)
                img = img.resize((int(width * scale), int(height * scale)))
            buf = BytesIO()
            img.save(buf, format="PNG")
            return buf.getvalue()
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("[image] preprocessing skipped: %s", exc)
        return image_data
