"""Shared enums used across the conversion pipeline and its result schema."""
from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories reported in ConversionResult.error."""
    INPUT = "input_error"
    BACKEND_LOAD = "backend_load_error"
    PARSE = "parse_error"
    PAGE_INDEX = "page_index_error"
    RENDER = "render_error"
    ENCODE = "encode_error"


class ConversionState(str, Enum):
    """Per-call pipeline states. DONE and FAILED are terminal."""
    IDLE = "idle"
    LOADING_BACKEND = "loading_backend"
    PARSING = "parsing"
    RENDERING = "rendering"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


# Media types accepted as PDF input
PDF_MEDIA_TYPES = ("application/pdf", "application/x-pdf")
