"""
Tests for result rendering.
"""

from __future__ import annotations

import json

import pytest

from pdfextract.errors import UnsupportedFormatError
from pdfextract.extract.base import ExtractionKind, OutputFormat
from pdfextract.formatting import build_envelope, format_result, parse_output_format, render

TIMESTAMP = "2024-05-01 12:00:00"


def _text_envelope(full_text: str = "=== Page 1 ===\nalpha\n\n=== Page 2 ===\nbeta\n\n") -> dict:
    return build_envelope(
        ExtractionKind.TEXT,
        {
            "pageCount": 2,
            "pageTexts": {"1": "alpha", "2": "beta"},
            "fullText": full_text,
        },
        "out/text/doc_text_1.txt",
        TIMESTAMP,
    )


def _images_envelope() -> dict:
    return build_envelope(
        ExtractionKind.IMAGES,
        {"imageCount": 1, "pageCount": 2, "images": ["out/images/doc_page1_img1_1.png"]},
        "out/images/doc_images_1.json",
        TIMESTAMP,
    )


def _tables_envelope() -> dict:
    return build_envelope(
        ExtractionKind.TABLES,
        {
            "tableCount": 2,
            "tables": [
                {
                    "page": 1,
                    "rowCount": 2,
                    "data": ["Name\tAge\tCity", "Alice\t30\tParis"],
                    "headers": ["Name", "Age", "City"],
                    "rows": [["Alice", "30", "Paris"]],
                },
                {"page": 3, "rowCount": 1, "data": ["x\ty\tz"]},
            ],
        },
        "out/tables/doc_tables_1.json",
        TIMESTAMP,
    )


def _forms_envelope(fields: dict | None = None) -> dict:
    return build_envelope(
        ExtractionKind.FORMS,
        {"fieldCount": len(fields or {}), "fields": fields or {}},
        "out/forms/doc_forms_1.json",
        TIMESTAMP,
    )


def _metadata_envelope() -> dict:
    return build_envelope(
        ExtractionKind.METADATA,
        {
            "metadata": {
                "title": "Report",
                "author": None,
                "pageCount": 3,
                "contentMetadata": {"Content-Type": "application/pdf"},
            }
        },
        "out/metadata/doc_metadata_1.json",
        TIMESTAMP,
    )


def _full_envelope(text: dict | None = None) -> dict:
    sections = {
        "text": text or _text_envelope(),
        "tables": _tables_envelope(),
        "metadata": _metadata_envelope(),
    }
    return build_envelope(
        ExtractionKind.FULL,
        {**sections, "extractionTimestamp": TIMESTAMP, "sourceFile": "doc.pdf"},
        "out/doc_full_1.json",
        TIMESTAMP,
    )


# --- parse_output_format ---


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("json", OutputFormat.JSON),
        ("JSON", OutputFormat.JSON),
        ("structured", OutputFormat.JSON),
        ("markdown", OutputFormat.MARKDOWN),
        (" PlainText ", OutputFormat.PLAINTEXT),
        (None, OutputFormat.JSON),
        ("", OutputFormat.JSON),
        (OutputFormat.MARKDOWN, OutputFormat.MARKDOWN),
    ],
)
def test_parse_output_format(name, expected: OutputFormat) -> None:
    assert parse_output_format(name) is expected


def test_unknown_output_format_raises() -> None:
    with pytest.raises(UnsupportedFormatError, match="xml"):
        parse_output_format("xml")


# --- Envelope ---


def test_envelope_fields_come_first() -> None:
    envelope = build_envelope(ExtractionKind.IMAGES, {"imageCount": 0}, "x.json")
    assert list(envelope)[:4] == ["status", "extractionType", "timestamp", "outputFile"]
    assert envelope["status"] == "success"
    assert envelope["extractionType"] == "images"


def test_json_rendering_is_lossless() -> None:
    envelope = _tables_envelope()
    assert json.loads(render(envelope, "json")) == envelope


def test_format_result_wraps_payload() -> None:
    body = format_result(ExtractionKind.FORMS, {"fieldCount": 0, "fields": {}}, "f.json", "json")
    parsed = json.loads(body)
    assert parsed["extractionType"] == "forms"
    assert parsed["outputFile"] == "f.json"
    assert parsed["fieldCount"] == 0


@pytest.mark.parametrize(
    "envelope",
    [
        _text_envelope(),
        _images_envelope(),
        _tables_envelope(),
        _forms_envelope(),
        _metadata_envelope(),
        _full_envelope(),
    ],
    ids=["text", "images", "tables", "forms", "metadata", "full"],
)
@pytest.mark.parametrize("fmt", ["markdown", "plaintext"])
def test_reparsed_json_renders_identically(envelope: dict, fmt: str) -> None:
    """Test markdown and plaintext are projections of the json form."""
    reparsed = json.loads(render(envelope, "json"))
    assert render(reparsed, fmt) == render(envelope, fmt)


# --- Text ---


def test_text_markdown() -> None:
    md = render(_text_envelope(), "markdown")
    assert md.startswith("# PDF Text Extraction\n")
    assert "**Status:** success" in md
    assert "**Pages:** 2" in md
    assert f"**Timestamp:** {TIMESTAMP}" in md
    assert "## Full Text" in md
    assert "=== Page 2 ===\nbeta" in md


def test_text_plaintext_is_full_text() -> None:
    envelope = _text_envelope()
    assert render(envelope, "plaintext") == envelope["fullText"]


# --- Tables ---


def test_tables_markdown_pipe_table() -> None:
    md = render(_tables_envelope(), "markdown")
    assert "## Table 1 (Page 1)" in md
    assert "| Name | Age | City |" in md
    assert "| --- | --- | --- |" in md
    assert "| Alice | 30 | Paris |" in md


def test_tables_markdown_headerless_table_uses_raw_lines() -> None:
    md = render(_tables_envelope(), "markdown")
    assert "## Table 2 (Page 3)" in md
    assert "```\nx\ty\tz\n```" in md


def test_tables_plaintext() -> None:
    text = render(_tables_envelope(), "plaintext")
    assert "Tables found: 2" in text
    assert "Table 2 (page 3, 1 rows)" in text
    assert "Alice\t30\tParis" in text


def test_pipe_cells_are_escaped() -> None:
    envelope = build_envelope(
        ExtractionKind.TABLES,
        {
            "tableCount": 1,
            "tables": [
                {
                    "page": 1,
                    "rowCount": 2,
                    "data": [],
                    "headers": ["a|b", "c", "d"],
                    "rows": [["1", "2", "3"]],
                }
            ],
        },
        None,
        TIMESTAMP,
    )
    assert "| a\\|b | c | d |" in render(envelope, "markdown")


# --- Forms ---


def test_forms_markdown_without_fields() -> None:
    assert "_No form fields found._" in render(_forms_envelope(), "markdown")


def test_forms_markdown_with_fields() -> None:
    fields = {
        "applicant": {"name": "applicant", "type": "Tx", "value": "Alice", "readonly": False, "required": True},
    }
    md = render(_forms_envelope(fields), "markdown")
    assert "| Field | Type | Value | Read-only | Required |" in md
    assert "| applicant | Tx | Alice | no | yes |" in md


def test_forms_plaintext_flags() -> None:
    fields = {
        "locked": {"name": "locked", "type": "Tx", "value": None, "readonly": True, "required": False},
    }
    text = render(_forms_envelope(fields), "plaintext")
    assert "locked [Tx] =  (read-only)" in text


# --- Metadata ---


def test_metadata_markdown_separates_content_metadata() -> None:
    md = render(_metadata_envelope(), "markdown")
    assert "| title | Report |" in md
    assert "| author |  |" in md
    assert "## Content Metadata" in md
    assert "- **Content-Type:** application/pdf" in md


def test_metadata_plaintext() -> None:
    text = render(_metadata_envelope(), "plaintext")
    assert "title: Report" in text
    assert "Content-Type: application/pdf" in text


# --- Full ---


def test_full_markdown_nests_sections() -> None:
    md = render(_full_envelope(), "markdown")
    assert md.startswith("# PDF Full Extraction\n")
    assert "**Source File:** doc.pdf" in md
    assert "\n## PDF Text Extraction\n" in md
    assert "\n### Full Text\n" in md
    assert "\n## PDF Table Extraction\n" in md
    assert md.index("PDF Text Extraction") < md.index("PDF Table Extraction") < md.index("PDF Metadata Extraction")


def test_full_plaintext_banners() -> None:
    text = render(_full_envelope(), "plaintext")
    assert "----- TEXT -----" in text
    assert "----- TABLES -----" in text
    assert "----- IMAGES -----" not in text


def test_full_markdown_keeps_fenced_text() -> None:
    """Test headings inside extracted text are not demoted with the sections."""
    text = _text_envelope("=== Page 1 ===\n# Section heading\n\n")
    md = render(_full_envelope(text), "markdown")

    assert "\n# Section heading\n" in md
    assert "## Section heading" not in md
    assert "\n### Full Text\n" in md
