from __future__ import annotations

import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from photocheck.core.errors import DecodeError, PayloadTooLargeError, UnsupportedFormatError
from photocheck.core.models import DEFAULT_CONFIG, PixelBuffer, ValidationConfig

logger = logging.getLogger(__name__)

# Pillow format names for each accepted content type
_PIL_FORMATS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}

_MIME_ALIASES = {
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
    "image/x-png": "image/png",
}


def normalize_mime_type(mime_type: str | None) -> str:
    """Lower-case, drop parameters (`; charset=...`) and resolve common aliases."""
    if not mime_type:
        return ""
    base = mime_type.split(";", 1)[0].strip().lower()
    return _MIME_ALIASES.get(base, base)


def check_upload(data: bytes, mime_type: str | None, config: ValidationConfig = DEFAULT_CONFIG) -> str:
    """
    Reject uploads that must never reach the decoder. Returns the normalised MIME type.
    """
    mime = normalize_mime_type(mime_type)
    if mime not in config.allowed_mime_types or mime not in _PIL_FORMATS:
        logger.warning("Rejected upload with content type %r", mime_type)
        raise UnsupportedFormatError(f"unsupported content type: {mime_type!r}")

    if len(data) > config.max_upload_bytes:
        logger.warning("Rejected upload of %d bytes (limit %d)", len(data), config.max_upload_bytes)
        raise PayloadTooLargeError(f"{len(data)} bytes exceeds limit of {config.max_upload_bytes}")
    return mime


def decode_image(data: bytes, mime: str) -> Image.Image:
    """Decode bytes as the claimed format, apply EXIF orientation, return an RGBA image."""
    if not data:
        raise DecodeError("empty payload")

    fmt = _PIL_FORMATS[mime]
    try:
        img = Image.open(io.BytesIO(data), formats=[fmt])
        img.load()
        img = ImageOps.exif_transpose(img)
        if img.mode != "RGBA":
            img = img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, EOFError, ValueError, SyntaxError) as e:
        logger.warning("Could not decode %d bytes as %s: %s", len(data), fmt, e)
        raise DecodeError(f"could not decode image as {fmt}: {e}") from e

    if img.width <= 0 or img.height <= 0:
        raise DecodeError("decoded image has no pixels")
    return img


def load_pixel_buffer(
    data: bytes,
    mime_type: str | None,
    config: ValidationConfig = DEFAULT_CONFIG,
) -> PixelBuffer:
    """
    Turn an uploaded payload into a PixelBuffer.

    Raises UnsupportedFormatError, PayloadTooLargeError (both before decoding) or DecodeError.
    """
    mime = check_upload(data, mime_type, config)
    img = decode_image(data, mime)
    logger.debug("Decoded %s image %dx%d", mime, img.width, img.height)
    return PixelBuffer(width=img.width, height=img.height, data=img.tobytes())
