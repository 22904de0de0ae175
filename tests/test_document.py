"""Tests for PDF parsing and page access."""
import asyncio

import pytest

from pdf_preview import document
from pdf_preview.document import parse
from pdf_preview.exceptions import PageIndexError, ParseError


def _page_count(backend, data):
    async def _run():
        async with await parse(backend, data) as handle:
            return handle.page_count
    return asyncio.run(_run())


def _get_page(backend, data, index):
    async def _run():
        async with await parse(backend, data) as handle:
            page = await handle.get_page(index)
            return page.number
    return asyncio.run(_run())


class TestParse:
    def test_single_page(self, backend, pdf_bytes):
        assert _page_count(backend, pdf_bytes) == 1

    def test_multi_page(self, backend, multi_page_pdf_bytes):
        assert _page_count(backend, multi_page_pdf_bytes) == 3

    def test_empty_bytes(self, backend):
        with pytest.raises(ParseError, match="empty"):
            asyncio.run(parse(backend, b""))

    def test_not_a_pdf(self, backend):
        with pytest.raises(ParseError):
            asyncio.run(parse(backend, b"this is a plain text resume, not a PDF"))

    def test_encrypted(self, backend, encrypted_pdf_bytes):
        with pytest.raises(ParseError, match="password"):
            asyncio.run(parse(backend, encrypted_pdf_bytes))

    def test_too_many_pages(self, backend, multi_page_pdf_bytes, monkeypatch):
        monkeypatch.setattr(document, "MAX_PAGE_COUNT", 2)
        with pytest.raises(ParseError, match="more than the supported 2"):
            asyncio.run(parse(backend, multi_page_pdf_bytes))


class TestGetPage:
    def test_first_page(self, backend, pdf_bytes):
        assert _get_page(backend, pdf_bytes, 0) == 0

    def test_last_page(self, backend, multi_page_pdf_bytes):
        assert _get_page(backend, multi_page_pdf_bytes, 2) == 2

    def test_index_equal_to_count(self, backend, multi_page_pdf_bytes):
        with pytest.raises(PageIndexError, match="out of range"):
            _get_page(backend, multi_page_pdf_bytes, 3)

    def test_negative_index(self, backend, pdf_bytes):
        with pytest.raises(PageIndexError):
            _get_page(backend, pdf_bytes, -1)

    @pytest.mark.parametrize("index", ["1", 0.0, None, True])
    def test_non_integer_index(self, backend, pdf_bytes, index):
        with pytest.raises(PageIndexError, match="must be an integer"):
            _get_page(backend, pdf_bytes, index)


def test_handle_closes_document(backend, pdf_bytes):
    async def _run():
        handle = await parse(backend, pdf_bytes)
        async with handle:
            pass
        return handle

    handle = asyncio.run(_run())
    assert handle._doc is None
    # closing twice is harmless
    asyncio.run(handle.close())
