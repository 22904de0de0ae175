"""Typed stage failures for the conversion pipeline.

Each stage raises one of these; only the orchestrator catches them and turns
them into a ConversionResult.
"""
from schemas.enums import ErrorKind


class ConversionError(Exception):
    """Base class for all pipeline stage failures."""

    # set by each subclass; a bare ConversionError takes the failing stage's kind
    kind: ErrorKind

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "Unknown conversion error."


class InputError(ConversionError):
    """Raised when the input document is absent, empty or not a PDF."""

    kind = ErrorKind.INPUT

    @property
    def default_message(self) -> str:
        return "No file provided"


class BackendLoadError(ConversionError):
    """Raised when the rendering engine cannot be initialized."""

    kind = ErrorKind.BACKEND_LOAD

    @property
    def default_message(self) -> str:
        return "PDF rendering engine could not be loaded."


class ParseError(ConversionError):
    """Raised when document bytes are malformed or unsupported."""

    kind = ErrorKind.PARSE

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class PageIndexError(ConversionError):
    """Raised when the requested page is out of range."""

    kind = ErrorKind.PAGE_INDEX

    @property
    def default_message(self) -> str:
        return "Requested page is out of range."


class RenderError(ConversionError):
    """Raised when a page cannot be painted into a pixel surface."""

    kind = ErrorKind.RENDER

    @property
    def default_message(self) -> str:
        return "Page could not be rendered."


class EncodeError(ConversionError):
    """Raised when a pixel surface cannot be serialized."""

    kind = ErrorKind.ENCODE

    @property
    def default_message(self) -> str:
        return "Failed to create image blob"
