"""
Secondary content detection.

Reads a file's generic metadata independently of the main PyMuPDF
parser: the media type sniffed from magic bytes (filetype), and for PDFs
the raw document information dictionary as seen by pypdf, keyed the way
content-detection toolkits usually report it.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path

import filetype
from pypdf import PdfReader

UNKNOWN_MIME = "unknown"


def detect_mime_type(path: str | Path) -> str:
    """
    Guess a file's media type.

    Magic bytes win; the file name is consulted only when the content is
    not recognised.
    """
    kind = filetype.guess(str(path))
    if kind is not None:
        return kind.mime

    guessed, _ = mimetypes.guess_type(str(path))
    return guessed or UNKNOWN_MIME


def content_metadata(path: str | Path) -> dict[str, str]:
    """
    Generic metadata for a file, as a flat string mapping.

    Args:
        path: File to inspect

    Returns:
        Mapping such as ``{"Content-Type": "application/pdf", "dc:title": ...}``
    """
    metadata: dict[str, str] = {"Content-Type": detect_mime_type(path)}

    if metadata["Content-Type"] != "application/pdf":
        return metadata

    reader = PdfReader(str(path))
    metadata["pdf:PDFVersion"] = reader.pdf_header.replace("%PDF-", "")
    metadata["pdf:encrypted"] = str(reader.is_encrypted).lower()

    if reader.is_encrypted:
        # Page tree and info dictionary are unreadable without a password
        return metadata

    metadata["xmpTPg:NPages"] = str(len(reader.pages))

    info = reader.metadata
    if info:
        for key, value in info.items():
            metadata[key.lstrip("/")] = str(value)

        if info.title:
            metadata["dc:title"] = str(info.title)
        if info.author:
            metadata["dc:creator"] = str(info.author)
        if info.creator:
            metadata["xmp:CreatorTool"] = str(info.creator)
        if info.producer:
            metadata["pdf:producer"] = str(info.producer)

    return metadata
