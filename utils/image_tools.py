"""
Pillow helpers that prepare a product photo for the image edit endpoint.
"""

import logging
from io import BytesIO
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from utils.errors import InvalidImageError

logger = logging.getLogger(__name__)

MAX_SOURCE_WIDTH = 2048


def _open_image_bytes(img_bytes: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(img_bytes))
        img.load()
        # Phone photos often carry their rotation in EXIF only
        return ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise InvalidImageError(f"Imagem inválida: {e}") from e


def _to_png_bytes(img: Image.Image) -> bytes:
    out = BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


def to_editable_source(raw_bytes: bytes, max_width: int = MAX_SOURCE_WIDTH) -> Tuple[bytes, int, int]:
    """
    Convert any decodable image into an RGBA PNG no wider than max_width.

    Args:
        raw_bytes: Image as downloaded (JPEG, PNG, WEBP...)
        max_width: Width cap in pixels; aspect ratio is preserved

    Returns:
        (png_bytes, width, height) of the converted image

    Raises:
        InvalidImageError: If the bytes are not an image Pillow can read
    """
    img = _open_image_bytes(raw_bytes).convert("RGBA")

    width, height = img.size
    if width > max_width:
        new_height = max(1, round(height * max_width / width))
        img = img.resize((max_width, new_height), Image.LANCZOS)
        logger.info(f"Downscaled source image from {width}x{height} to {max_width}x{new_height}")
        width, height = max_width, new_height

    return _to_png_bytes(img), width, height


def build_white_mask(width: int, height: int) -> bytes:
    """Opaque white PNG of the given size: every pixel may be edited."""
    mask = Image.new("RGBA", (width, height), (255, 255, 255, 255))
    return _to_png_bytes(mask)
