"""
Reference image helpers: bytes <-> base64 data URLs
"""
import base64
import logging
from io import BytesIO
from typing import Tuple

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"

# Formats Gemini accepts as inline image data
SUPPORTED_FORMATS = ("png", "jpeg", "webp", "heic", "heif")

# Pillow names for container variants of a supported format
FORMAT_ALIASES = {
    "mpo": "jpeg",  # multi-picture JPEG from phone cameras
    "jpg": "jpeg",
}


def _format_name(img: Image.Image) -> str:
    name = img.format.lower() if img.format else "jpeg"
    return FORMAT_ALIASES.get(name, name)


def detect_mime_type(image_bytes: bytes) -> str:
    """Detect image MIME type with Pillow, defaulting to image/jpeg"""
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            return f"image/{_format_name(img)}"
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Could not detect image format, assuming JPEG: {e}")
        return DEFAULT_MIME_TYPE


def is_image(image_bytes: bytes) -> bool:
    """Check that Pillow can identify the bytes as an image"""
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            img.verify()
        return True
    except (UnidentifiedImageError, OSError, SyntaxError):
        return False


def _convert_to_png(img: Image.Image) -> bytes:
    """Re-save the first frame as PNG, keeping transparency"""
    img.seek(0)
    if img.mode in ('RGBA', 'LA', 'P'):
        img = img.convert('RGBA')
    else:
        img = img.convert('RGB')
    output = BytesIO()
    img.save(output, format='PNG', optimize=True)
    return output.getvalue()


def prepare_reference_image(image_bytes: bytes) -> Tuple[bytes, str]:
    """
    Make an upload acceptable as Gemini inline data.

    Supported formats pass through unchanged; anything else Pillow can read
    (GIF, BMP, TIFF, ...) is converted to PNG.

    Returns:
        (image bytes, MIME type)
    """
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            img_format = _format_name(img)
            if img_format in SUPPORTED_FORMATS:
                return image_bytes, f"image/{img_format}"
            logger.info(f"Converting {img_format.upper()} reference image to PNG")
            return _convert_to_png(img), "image/png"
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Could not read reference image, sending as JPEG: {e}")
        return image_bytes, DEFAULT_MIME_TYPE


def image_to_data_url(image_bytes: bytes) -> str:
    """
    Encode image bytes as a data URL in a format Gemini accepts.

    Args:
        image_bytes: Raw image bytes

    Returns:
        "data:<mime>;base64,<payload>"
    """
    image_bytes, mime_type = prepare_reference_image(image_bytes)
    payload = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{payload}"


def split_data_url(data_url: str) -> Tuple[str, str]:
    """
    Split a data URL into (mime_type, base64 payload).

    Plain base64 without a "data:" prefix is accepted and treated as JPEG.
    """
    if data_url.startswith("data:") and "," in data_url:
        header, payload = data_url.split(",", 1)
        mime_type = header[len("data:"):].split(";")[0] or DEFAULT_MIME_TYPE
        return mime_type, payload
    return DEFAULT_MIME_TYPE, data_url
