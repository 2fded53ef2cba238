"""PDF extraction primitives and result types."""

from __future__ import annotations

from .base import (
    ExtractionKind,
    ExtractionRequest,
    FormField,
    FormResult,
    ImageFormat,
    ImageResult,
    MetadataResult,
    OutputFormat,
    Table,
    TableResult,
    TextResult,
)
from .detect import content_metadata, detect_mime_type
from .image import encode_image, parse_image_format
from .pdf import DATE_FORMAT, EmbeddedImage, PdfDocument, parse_pdf_date

__all__ = [
    "ExtractionKind",
    "ExtractionRequest",
    "OutputFormat",
    "ImageFormat",
    "Table",
    "FormField",
    "TextResult",
    "ImageResult",
    "TableResult",
    "FormResult",
    "MetadataResult",
    "PdfDocument",
    "EmbeddedImage",
    "DATE_FORMAT",
    "parse_pdf_date",
    "content_metadata",
    "detect_mime_type",
    "encode_image",
    "parse_image_format",
]
