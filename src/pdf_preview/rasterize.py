"""Render a single PDF page into a pixel surface.

Uses PyMuPDF pixmaps. Page sizes are in points (72 pts = 1 inch), so
scale=2.0 renders at 144 DPI.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Tuple

from .backend import RenderBackend
from .exceptions import RenderError

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 2.0

# Largest edge, in pixels, we are willing to allocate (10000x10000 RGB ~ 300 MB)
MAX_SURFACE_EDGE = 10_000


@dataclass
class PageSurface:
    """A rasterized page at one scale factor."""
    width: int
    height: int
    scale: float
    pixmap: Any
    pixel_format: str = "RGB"

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def scaled_size(width: float, height: float, scale: float) -> Tuple[int, int]:
    """Pixel dimensions of a width x height viewport at *scale*."""
    return round(width * scale), round(height * scale)


def _check_scale(scale: float) -> float:
    try:
        scale = float(scale)
    except (TypeError, ValueError):
        raise RenderError(f"Scale must be a number, got {scale!r}")
    if not math.isfinite(scale) or scale <= 0:
        raise RenderError(f"Scale must be a positive finite number, got {scale}")
    return scale


def _render(engine: Any, page: Any, scale: float) -> PageSurface:
    viewport = page.rect
    width, height = scaled_size(viewport.width, viewport.height, scale)

    if width > MAX_SURFACE_EDGE or height > MAX_SURFACE_EDGE:
        raise RenderError(
            f"Rendered page would be {width}x{height} px, "
            f"larger than the {MAX_SURFACE_EDGE} px limit"
        )
    if width < 1 or height < 1:
        raise RenderError(f"Page viewport {viewport.width}x{viewport.height} is empty at scale {scale}")

    # Per-axis factors so pixmap size lands exactly on the rounded dimensions
    matrix = engine.Matrix(width / viewport.width, height / viewport.height)
    try:
        # alpha=False forces an opaque white background
        pix = page.get_pixmap(matrix=matrix, alpha=False)
    except Exception as e:
        raise RenderError(f"Failed to render page: {e}") from e

    return PageSurface(width=pix.width, height=pix.height, scale=scale, pixmap=pix)


async def render_page(backend: RenderBackend, page: Any, scale: float = DEFAULT_SCALE) -> PageSurface:
    """Rasterize *page* at *scale* times its native size.

    Raises:
        RenderError: If scale is not positive, the surface would exceed
            MAX_SURFACE_EDGE, or the engine fails to paint the page
    """
    scale = _check_scale(scale)
    surface = await backend.run(_render, backend.engine, page, scale)
    logger.debug(f"Rendered page at scale {scale}: {surface.width}x{surface.height} px")
    return surface
