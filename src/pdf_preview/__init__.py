"""PDF preview - render the first page of an uploaded résumé as a PNG."""

__version__ = "0.1.0"

from .backend import BackendLoader, RenderBackend, get_default_loader
from .document import DocumentHandle, parse
from .encode import encode_surface
from .exceptions import (
    BackendLoadError,
    ConversionError,
    EncodeError,
    InputError,
    PageIndexError,
    ParseError,
    RenderError,
)
from .pipeline import convert, convert_pdf_to_image
from .rasterize import PageSurface, render_page

__all__ = [
    "convert",
    "convert_pdf_to_image",
    "BackendLoader",
    "RenderBackend",
    "get_default_loader",
    "DocumentHandle",
    "parse",
    "PageSurface",
    "render_page",
    "encode_surface",
    "ConversionError",
    "InputError",
    "BackendLoadError",
    "ParseError",
    "PageIndexError",
    "RenderError",
    "EncodeError",
    "__version__",
]
