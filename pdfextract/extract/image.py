"""Image re-encoding with Pillow.

Embedded PDF images arrive in whatever encoding the producer used
(JPEG, JPX, raw PNG, CMYK JPEG, ...). Saved artifacts are normalised to
the format the caller asked for.
"""

from __future__ import annotations

import io

from PIL import Image

from ..errors import UnsupportedFormatError
from .base import ImageFormat

# Pillow format names
_PIL_FORMATS: dict[ImageFormat, str] = {
    ImageFormat.PNG: "PNG",
    ImageFormat.JPG: "JPEG",
    ImageFormat.GIF: "GIF",
}

_ALIASES = {"jpeg": ImageFormat.JPG}


def parse_image_format(name: str | ImageFormat | None) -> ImageFormat:
    """
    Resolve an image format name (``png``, ``jpg``/``jpeg``, ``gif``).

    Raises:
        UnsupportedFormatError: If the name is not one of the supported formats
    """
    if isinstance(name, ImageFormat):
        return name
    if name is None or not name.strip():
        return ImageFormat.PNG

    key = name.strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return ImageFormat(key)
    except ValueError:
        raise UnsupportedFormatError(f"Unsupported image format: {name}") from None


def encode_image(data: bytes, image_format: ImageFormat) -> bytes:
    """
    Decode raw image bytes and re-encode them as ``image_format``.

    Args:
        data: Raw embedded image bytes
        image_format: Target encoding

    Returns:
        Encoded image bytes
    """
    with Image.open(io.BytesIO(data)) as img:
        img.load()

        if image_format is ImageFormat.JPG:
            # JPEG has no alpha channel or palette transparency
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
        elif img.mode not in ("RGB", "RGBA", "L", "LA", "P", "1"):
            # CMYK, YCbCr, I;16 and friends
            img = img.convert("RGBA" if "A" in img.mode else "RGB")

        buffer = io.BytesIO()
        img.save(buffer, format=_PIL_FORMATS[image_format])
        return buffer.getvalue()
