"""
Shared fixtures: small PDFs generated on the fly with PyMuPDF.
"""

from __future__ import annotations

import io
from pathlib import Path

import fitz
import pytest
from PIL import Image

from pdfextract.config import ExtractorConfig
from pdfextract.router import ExtractionRouter
from pdfextract.storage import DocumentWorkspace
from pdfextract.tools import ToolDispatcher


def _png_bytes(color: tuple[int, int, int] = (200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (16, 16), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def config(tmp_path: Path) -> ExtractorConfig:
    """Configuration rooted in a temporary directory."""
    return ExtractorConfig(
        output_directory=tmp_path / "out",
        files_directory=tmp_path / "files",
    )


@pytest.fixture
def router(config: ExtractorConfig) -> ExtractionRouter:
    return ExtractionRouter(config)


@pytest.fixture
def workspace(config: ExtractorConfig) -> DocumentWorkspace:
    return DocumentWorkspace(config.files_directory)


@pytest.fixture
def dispatcher(router: ExtractionRouter, workspace: DocumentWorkspace) -> ToolDispatcher:
    return ToolDispatcher(router, workspace)


@pytest.fixture
def text_pdf(tmp_path: Path) -> Path:
    """Three pages of text with a title and author set."""
    path = tmp_path / "report.pdf"
    doc = fitz.open()
    for n in range(1, 4):
        page = doc.new_page()
        page.insert_text((72, 72), f"Hello from page {n}")
    doc.set_metadata({"title": "Quarterly Report", "author": "Finance Team"})
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def image_pdf(tmp_path: Path) -> Path:
    """Two pages, one embedded PNG on each."""
    path = tmp_path / "pictures.pdf"
    doc = fitz.open()
    for color in ((200, 30, 30), (30, 30, 200)):
        page = doc.new_page()
        page.insert_image(fitz.Rect(72, 72, 172, 172), stream=_png_bytes(color))
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def form_pdf(tmp_path: Path) -> Path:
    """One page with two text fields, the second marked required."""
    path = tmp_path / "application.pdf"
    doc = fitz.open()
    page = doc.new_page()

    name = fitz.Widget()
    name.field_name = "applicant"
    name.field_type = fitz.PDF_WIDGET_TYPE_TEXT
    name.field_value = "Alice"
    name.rect = fitz.Rect(72, 100, 272, 130)
    page.add_widget(name)

    ref = fitz.Widget()
    ref.field_name = "reference"
    ref.field_type = fitz.PDF_WIDGET_TYPE_TEXT
    ref.field_value = "A-17"
    ref.field_flags = fitz.PDF_FIELD_IS_REQUIRED
    ref.rect = fitz.Rect(72, 150, 272, 180)
    page.add_widget(ref)

    doc.save(str(path))
    doc.close()
    return path


class FakeDocument:
    """Stand-in for PdfDocument serving fixed page texts."""

    def __init__(self, pages: list[str]) -> None:
        self.pages = pages

    def __enter__(self) -> FakeDocument:
        return self

    def __exit__(self, *exc) -> None:
        pass

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page_text(self, page_number: int) -> str:
        return self.pages[page_number - 1]


@pytest.fixture
def fake_pdf(tmp_path: Path) -> Path:
    """A file that passes validation; its content is served by FakeDocument."""
    path = tmp_path / "tabular.pdf"
    path.write_bytes(b"%PDF-1.7\n")
    return path
