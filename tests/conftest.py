"""Pytest configuration and fixtures for docconvert tests."""

from io import BytesIO
from typing import Dict, List, Sequence

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from pypdf import PdfReader, PdfWriter

from docconvert.api.uploads import get_storage
from docconvert.main import app


# --- Document builders ---


def build_pdf(widths: Sequence[int], height: int = 300) -> bytes:
    """PDF whose pages are told apart by their width in points."""
    writer = PdfWriter()
    for width in widths:
        writer.add_blank_page(width=width, height=height)
    output = BytesIO()
    writer.write(output)
    return output.getvalue()


def build_pdf_with_untyped_page(widths: Sequence[int], height: int = 300) -> bytes:
    """PDF that parses, but whose first page entry is not a /Page dictionary."""
    writer = PdfWriter()
    pages = [writer.add_blank_page(width=width, height=height) for width in widths]
    del pages[0]["/Type"]
    output = BytesIO()
    writer.write(output)
    return output.getvalue()


def page_widths(pdf_content: bytes) -> List[int]:
    reader = PdfReader(BytesIO(pdf_content))
    return [round(float(page.mediabox.width)) for page in reader.pages]


def build_image(size=(800, 600), fmt: str = "PNG", color: str = "white") -> bytes:
    output = BytesIO()
    Image.new("RGB", size, color).save(output, format=fmt)
    return output.getvalue()


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def make_image():
    return build_image


@pytest.fixture
def widths_of():
    return page_widths


@pytest.fixture
def broken_page_pdf():
    return build_pdf_with_untyped_page([101, 102, 103])


@pytest.fixture
def five_page_pdf():
    return build_pdf([101, 102, 103, 104, 105])


# --- Transient storage fake ---


class InMemoryStorage:
    """TransientStorage keeping blobs in a dict."""

    def __init__(self, fail_on_delete: bool = False):
        self.blobs: Dict[str, bytes] = {}
        self.saved: List[str] = []
        self.deleted: List[str] = []
        self.fail_on_delete = fail_on_delete

    def save(self, data: bytes) -> str:
        handle = f"mem-{len(self.saved)}"
        self.blobs[handle] = data
        self.saved.append(handle)
        return handle

    def open(self, handle: str) -> bytes:
        return self.blobs[handle]

    def delete(self, handle: str) -> None:
        self.deleted.append(handle)
        if self.fail_on_delete:
            raise OSError(f"cannot delete {handle}")
        del self.blobs[handle]


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
