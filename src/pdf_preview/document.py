"""Parse raw PDF bytes into a page-addressable document handle."""
import logging
from typing import Any, Tuple

from .backend import RenderBackend
from .exceptions import PageIndexError, ParseError

logger = logging.getLogger(__name__)

# Documents with more pages than this are rejected before any page is touched
MAX_PAGE_COUNT = 2000


class DocumentHandle:
    """An open engine document, valid for a single conversion call.

    Use as an async context manager so the engine document is closed on the
    backend worker when the call finishes.
    """

    def __init__(self, backend: RenderBackend, doc: Any, page_count: int):
        self._backend = backend
        self._doc = doc
        self._page_count = page_count

    @property
    def page_count(self) -> int:
        return self._page_count

    async def get_page(self, index: int) -> Any:
        """Load a page by 0-based index.

        Raises:
            PageIndexError: If index is not an int, is negative or >= page_count
        """
        if not isinstance(index, int) or isinstance(index, bool):
            raise PageIndexError(f"Page index must be an integer, got {index!r}")
        if index < 0 or index >= self._page_count:
            raise PageIndexError(
                f"Page {index} out of range (PDF has {self._page_count} pages)"
            )
        return await self._backend.run(self._doc.load_page, index)

    async def close(self) -> None:
        if self._doc is not None:
            await self._backend.run(self._doc.close)
            self._doc = None

    async def __aenter__(self) -> "DocumentHandle":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


def _open_document(engine: Any, data: bytes) -> Tuple[Any, int]:
    try:
        doc = engine.open(stream=data, filetype="pdf")
    except Exception as e:
        raise ParseError(f"Not a readable PDF: {e}") from e

    try:
        if not doc.is_pdf:
            raise ParseError("Document is not a PDF")
        if doc.needs_pass:
            raise ParseError("PDF is encrypted and cannot be opened without a password")
        if doc.page_count < 1:
            raise ParseError("PDF has no pages")
        if doc.page_count > MAX_PAGE_COUNT:
            raise ParseError(
                f"PDF has {doc.page_count} pages, more than the supported {MAX_PAGE_COUNT}"
            )
    except ParseError:
        doc.close()
        raise
    return doc, doc.page_count


async def parse(backend: RenderBackend, data: bytes) -> DocumentHandle:
    """Open *data* as a PDF on the backend worker.

    Raises:
        ParseError: If data is empty, malformed, encrypted, has no pages or
            exceeds MAX_PAGE_COUNT pages
    """
    if not data:
        raise ParseError("PDF data is empty")

    doc, page_count = await backend.run(_open_document, backend.engine, data)
    handle = DocumentHandle(backend, doc, page_count)
    logger.debug(f"Parsed PDF: {handle.page_count} page(s), {len(data):,} bytes")
    return handle
