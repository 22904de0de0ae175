"""PDF preview schemas - Pydantic models for conversion input and output."""
from .conversion import ConversionResult, InputDocument
from .enums import PDF_MEDIA_TYPES, ConversionState, ErrorKind

__all__ = [
    # Conversion I/O
    "InputDocument",
    "ConversionResult",
    # Enums
    "ErrorKind",
    "ConversionState",
    "PDF_MEDIA_TYPES",
]
