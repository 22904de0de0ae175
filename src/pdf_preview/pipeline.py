"""Conversion orchestrator - first page of an uploaded PDF to a PNG preview.

Pipeline (one call):
    idle -> loading_backend -> parsing -> rendering -> encoding -> done

Every stage either hands its output to the next or raises a typed
ConversionError. The first failure stops the run and becomes the
ConversionResult's error; convert() itself never raises.
"""
import asyncio
import logging
from typing import Optional, Union

from schemas.conversion import ConversionResult, InputDocument
from schemas.enums import PDF_MEDIA_TYPES, ConversionState, ErrorKind
from telemetry import Telemetry

from .backend import BackendLoader, get_default_loader
from .document import parse
from .encode import DEFAULT_FORMAT, encode_surface, media_type_for
from .exceptions import ConversionError, InputError
from .rasterize import DEFAULT_SCALE, render_page

logger = logging.getLogger(__name__)

OUTPUT_FILE_STEM = "resume"

# Error kind reported when the exception raised in a state carries none of its own
STAGE_ERROR_KINDS = {
    ConversionState.IDLE: ErrorKind.INPUT,
    ConversionState.LOADING_BACKEND: ErrorKind.BACKEND_LOAD,
    ConversionState.PARSING: ErrorKind.PARSE,
    ConversionState.RENDERING: ErrorKind.RENDER,
    ConversionState.ENCODING: ErrorKind.ENCODE,
}


def _validate_input(document: Union[InputDocument, bytes, None]) -> InputDocument:
    if document is None:
        raise InputError("No file provided")
    if isinstance(document, (bytes, bytearray)):
        document = InputDocument(data=bytes(document))
    if not document.data:
        raise InputError("No file provided")
    if document.media_type.lower() not in PDF_MEDIA_TYPES:
        raise InputError(f"Expected a PDF, got media type '{document.media_type}'")
    return document


def _error_message(error: ConversionError, kind: ErrorKind) -> str:
    if kind == ErrorKind.INPUT:
        return error.message
    return f"Failed to convert PDF: {error.message}"


async def convert(
    document: Union[InputDocument, bytes, None],
    *,
    scale: float = DEFAULT_SCALE,
    image_format: str = DEFAULT_FORMAT,
    page_index: int = 0,
    loader: Optional[BackendLoader] = None,
) -> ConversionResult:
    """
    Convert one page (the first, by default) of a PDF into an image.

    Args:
        document: Uploaded PDF (raw bytes are treated as application/pdf)
        scale: Multiple of the page's native size to render at (default 2.0)
        image_format: Output raster format (only "png" is supported)
        page_index: 0-based page to render
        loader: Backend loader to use (default: the process-wide loader)

    Returns:
        ConversionResult with image_bytes/file_name on success, or error and
        error_message on failure
    """
    loader = loader or get_default_loader()
    name = getattr(document, "name", None) or "document"
    tel = Telemetry(label=name)
    state = ConversionState.IDLE
    page_count = None

    try:
        document = _validate_input(document)
        logger.info(f"Converting {name} ({document.size:,} bytes) at scale {scale}")

        state = ConversionState.LOADING_BACKEND
        with tel.span(state.value):
            backend = await loader.ensure_ready()

        state = ConversionState.PARSING
        with tel.span(state.value):
            handle = await parse(backend, document.data)

        async with handle:
            page_count = handle.page_count
            with tel.span("loading_page"):
                page = await handle.get_page(page_index)

            state = ConversionState.RENDERING
            with tel.span(state.value):
                surface = await render_page(backend, page, scale)

            state = ConversionState.ENCODING
            with tel.span(state.value):
                image_bytes = await encode_surface(backend, surface, image_format)
                media_type = media_type_for(image_format)

    except ConversionError as e:
        kind = getattr(e, "kind", None) or STAGE_ERROR_KINDS[state]
        logger.error(f"Conversion of {name} failed while {state.value}: {e.message}")
        return ConversionResult.failure(
            kind,
            _error_message(e, kind),
            failed_stage=state,
            page_count=page_count,
            timings=tel.to_dict(),
        )
    except Exception as e:
        logger.exception(f"Unexpected error converting {name} while {state.value}")
        return ConversionResult.failure(
            STAGE_ERROR_KINDS[state],
            f"Failed to convert PDF: {e}",
            failed_stage=state,
            page_count=page_count,
            timings=tel.to_dict(),
        )

    logger.info(
        f"Converted {name}: {surface.width}x{surface.height} px, "
        f"{len(image_bytes):,} bytes in {tel.total_seconds():.2f}s"
    )
    return ConversionResult(
        image_bytes=image_bytes,
        file_name=f"{OUTPUT_FILE_STEM}.{image_format.lower()}",
        media_type=media_type,
        width=surface.width,
        height=surface.height,
        page_count=page_count,
        timings=tel.to_dict(),
    )


def convert_pdf_to_image(
    document: Union[InputDocument, bytes, None],
    *,
    scale: float = DEFAULT_SCALE,
    image_format: str = DEFAULT_FORMAT,
    page_index: int = 0,
) -> ConversionResult:
    """Synchronous wrapper around convert() for callers without an event loop."""
    return asyncio.run(
        convert(document, scale=scale, image_format=image_format, page_index=page_index)
    )
