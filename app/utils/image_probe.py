# app/utils/image_probe.py
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

# Pillow format name -> file extension
FORMAT_EXTENSIONS = {
    "JPEG": "jpg",
    # JPEG with an MPF segment, as written by most phone cameras
    "MPO": "jpg",
    "PNG": "png",
    "GIF": "gif",
    "WEBP": "webp",
    "BMP": "bmp",
    "TIFF": "tiff",
    "ICO": "ico",
}


def detect_image_extension(data: bytes) -> Optional[str]:
    """Return the extension matching the image content, or None if not an image."""
    if not data:
        return None
    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
            fmt = img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None
    return FORMAT_EXTENSIONS.get(fmt, (fmt or "").lower() or None)
