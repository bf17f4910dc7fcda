"""Image processing for images embedded in completion documents.

Uploaded bytes are validated with Pillow, downsampled when too large and
stored inline as a ``data:`` URI.
"""
import base64
import io
import logging

from PIL import Image, UnidentifiedImageError

from quizflow.config import (
    IMAGE_ALLOWED_FORMATS,
    IMAGE_MAX_DIMENSION,
    IMAGE_MAX_EMBED_BYTES,
    IMAGE_MAX_PIXELS,
    IMAGE_MAX_UPLOAD_BYTES,
)
from quizflow.errors import ValidationError

logger = logging.getLogger(__name__)

_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "GIF": "image/gif",
    "WEBP": "image/webp",
}


class ImageRejectedError(ValidationError):
    """Image cannot be embedded in a document."""


def _resize_image(img: Image.Image, image_format: str) -> bytes:
    """
    Downsample image to fit within max dimensions and re-encode it.

    Args:
        img: Opened image
        image_format: Pillow format name to encode with

    Returns:
        Encoded image bytes
    """
    width, height = img.size
    ratio = min(IMAGE_MAX_DIMENSION / width, IMAGE_MAX_DIMENSION / height)
    new_size = (max(1, int(width * ratio)), max(1, int(height * ratio)))

    if image_format == "JPEG" and img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    # Animated GIFs keep only their first frame
    resized = img.resize(new_size, Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    resized.save(buffer, format=image_format, optimize=True, quality=85)
    logger.info(f"Resized embedded image from {width}x{height} to {new_size}")
    return buffer.getvalue()


def encode_image(data: bytes) -> str:
    """
    Validate raw image bytes and return an embeddable data URI.

    Args:
        data: Raw bytes from a file selection

    Returns:
        ``data:<mime>;base64,...`` string

    Raises:
        ImageRejectedError: If the image is empty, unreadable, of an unsupported
            format, or too large even after downsampling
    """
    if not data:
        raise ImageRejectedError("Image is empty")

    if len(data) > IMAGE_MAX_UPLOAD_BYTES:
        raise ImageRejectedError(
            f"Image too large. Maximum size: {IMAGE_MAX_UPLOAD_BYTES // (1024 * 1024)}MB"
        )

    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = img.format or ""
            if image_format not in IMAGE_ALLOWED_FORMATS:
                raise ImageRejectedError(
                    f"Unsupported image format. Allowed: {', '.join(sorted(IMAGE_ALLOWED_FORMATS))}"
                )

            # Header only so far; refuse to decode oversized canvases
            width, height = img.size
            if width * height > IMAGE_MAX_PIXELS:
                logger.warning(f"Rejected image of {width}x{height} pixels")
                raise ImageRejectedError(
                    f"Image dimensions too large. Maximum: {IMAGE_MAX_PIXELS} pixels"
                )

            img.load()
            if width > IMAGE_MAX_DIMENSION or height > IMAGE_MAX_DIMENSION:
                data = _resize_image(img, image_format)
    except Image.DecompressionBombError as e:
        logger.warning(f"Rejected decompression bomb: {e}")
        raise ImageRejectedError("Image dimensions too large") from e
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Rejected unreadable image: {e}")
        raise ImageRejectedError("File is not a readable image") from e

    if len(data) > IMAGE_MAX_EMBED_BYTES:
        raise ImageRejectedError(
            f"Image too large to embed. Maximum size: {IMAGE_MAX_EMBED_BYTES // (1024 * 1024)}MB"
        )

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{_MIME_TYPES[image_format]};base64,{encoded}"
