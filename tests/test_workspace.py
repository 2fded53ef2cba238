"""
Tests for the files-to-extract working directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pdfextract.errors import InputFileNotFoundError
from pdfextract.storage import DocumentWorkspace, enhance_html


@pytest.fixture
def stocked(workspace: DocumentWorkspace, text_pdf: Path) -> DocumentWorkspace:
    """Workspace holding a copy of the text PDF and a note."""
    workspace.directory.mkdir(parents=True)
    (workspace.directory / "report.pdf").write_bytes(text_pdf.read_bytes())
    (workspace.directory / "notes.txt").write_text("plain notes")
    return workspace


# --- Listing ---


def test_list_creates_missing_directory(workspace: DocumentWorkspace) -> None:
    listing = workspace.list_files()
    assert workspace.directory.is_dir()
    assert listing["count"] == 0
    assert listing["message"].startswith("Directory created")
    assert listing["path"] == str(workspace.directory.resolve())


def test_list_empty_directory(workspace: DocumentWorkspace) -> None:
    workspace.directory.mkdir(parents=True)
    listing = workspace.list_files()
    assert listing["files"] == {}
    assert listing["message"].startswith("No files found")


def test_list_files(stocked: DocumentWorkspace) -> None:
    listing = stocked.list_files()
    assert listing["count"] == 2
    assert "message" not in listing

    report = listing["files"]["report.pdf"]
    assert report["mimeType"] == "application/pdf"
    assert report["canRead"] is True
    assert report["size"] == (stocked.directory / "report.pdf").stat().st_size
    assert isinstance(report["lastModified"], int)
    assert listing["files"]["notes.txt"]["mimeType"] == "text/plain"


def test_subdirectories_are_not_listed(stocked: DocumentWorkspace) -> None:
    (stocked.directory / "archive").mkdir()
    assert "archive" not in stocked.list_files()["files"]


# --- Resolution ---


def test_resolve_missing_file(stocked: DocumentWorkspace) -> None:
    with pytest.raises(InputFileNotFoundError, match="File not found: ghost.pdf"):
        stocked.resolve("ghost.pdf")


def test_resolve_rejects_escaping_paths(stocked: DocumentWorkspace, text_pdf: Path) -> None:
    """Test names cannot reach files outside the directory."""
    with pytest.raises(InputFileNotFoundError):
        stocked.resolve(f"../{text_pdf.name}")


def test_resolve_existing_file(stocked: DocumentWorkspace) -> None:
    assert stocked.resolve("report.pdf") == (stocked.directory / "report.pdf").resolve()


# --- Extraction ---


def test_extract_text(stocked: DocumentWorkspace) -> None:
    result = stocked.extract_text("report.pdf")
    assert result["mediaType"] == "application/pdf"
    for n in (1, 2, 3):
        assert f"Hello from page {n}" in result["text"]


def test_extract_html(stocked: DocumentWorkspace) -> None:
    result = stocked.extract_html("report.pdf")
    assert result["title"] == "Quarterly Report"
    assert result["author"] == "Finance Team"
    assert "<title>Quarterly Report</title>" in result["html"]
    assert "border-collapse" in result["html"]
    assert "Hello from page 1" in result["html"]


def test_file_metadata(stocked: DocumentWorkspace) -> None:
    result = stocked.file_metadata("report.pdf")
    assert result["metadata"]["Content-Type"] == "application/pdf"
    assert result["metadata"]["xmpTPg:NPages"] == "3"
    assert result["metadata"]["dc:creator"] == "Finance Team"


def test_enhance_html_adds_head_when_missing() -> None:
    html = enhance_html("<html><body>x</body></html>")
    assert html.startswith("<html><head>\n<style>")
    assert html.endswith("</head><body>x</body></html>")
