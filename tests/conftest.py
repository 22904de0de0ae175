"""Shared test fixtures and configuration."""
import asyncio
import time

import pymupdf
import pytest

from pdf_preview.backend import BackendLoader


def make_pdf(pages: int = 1, width: float = 612, height: float = 792) -> bytes:
    """Build a small text-only PDF in memory."""
    doc = pymupdf.open()
    for i in range(pages):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"Jane Doe - Software Engineer (page {i + 1})", fontsize=14)
        page.insert_text((72, 100), "Experience: Python, asyncio, PDF tooling", fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


class CountingLoad:
    """Backend load double: counts calls, optionally slow or failing."""

    def __init__(self, delay: float = 0.0, fail: bool = False):
        self.delay = delay
        self.fail = fail
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise ImportError("engine not installed")
        return pymupdf


@pytest.fixture
def pdf_bytes():
    """A single US-letter page."""
    return make_pdf()


@pytest.fixture
def multi_page_pdf_bytes():
    return make_pdf(pages=3)


@pytest.fixture
def encrypted_pdf_bytes():
    doc = pymupdf.open()
    doc.new_page()
    data = doc.tobytes(
        encryption=pymupdf.PDF_ENCRYPT_AES_256,
        owner_pw="owner-secret",
        user_pw="user-secret",
    )
    doc.close()
    return data


@pytest.fixture
def counting_load():
    return CountingLoad(delay=0.05)


@pytest.fixture
def loader(counting_load):
    """A fresh loader backed by the counting double."""
    return BackendLoader(load=counting_load)


@pytest.fixture(scope="session")
def backend():
    """A loaded backend shared by stage-level tests."""
    return asyncio.run(BackendLoader().ensure_ready())
