"""Serialize a rendered page surface into compressed image bytes."""
import logging
from typing import Any

from .backend import RenderBackend
from .exceptions import EncodeError
from .rasterize import PageSurface

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "png"

# Output formats and their MIME types. PNG is lossless, i.e. maximum quality.
SUPPORTED_FORMATS = {
    "png": "image/png",
}


def media_type_for(image_format: str) -> str:
    """Return the MIME type for a supported output format."""
    try:
        return SUPPORTED_FORMATS[image_format.lower()]
    except (KeyError, AttributeError):
        raise EncodeError(
            f"Unsupported image format {image_format!r} "
            f"(supported: {', '.join(sorted(SUPPORTED_FORMATS))})"
        )


def _encode(pixmap: Any, image_format: str) -> bytes:
    try:
        return pixmap.tobytes(output=image_format)
    except Exception as e:
        raise EncodeError(f"Failed to create image blob: {e}") from e


async def encode_surface(backend: RenderBackend, surface: PageSurface, image_format: str = DEFAULT_FORMAT) -> bytes:
    """Encode *surface* as *image_format* bytes on the backend worker.

    Raises:
        EncodeError: If the surface is empty, the format is unsupported, or
            encoding produced no bytes
    """
    media_type_for(image_format)
    if surface is None or surface.is_empty:
        raise EncodeError("Cannot encode an empty surface")

    image_format = image_format.lower()
    data = await backend.run(_encode, surface.pixmap, image_format)

    if not data:
        raise EncodeError("Failed to create image blob")

    logger.debug(f"Encoded {surface.width}x{surface.height} surface as {image_format}: {len(data):,} bytes")
    return data
