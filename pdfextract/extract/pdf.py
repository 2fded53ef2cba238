"""
PDF parsing primitives using PyMuPDF.

A thin wrapper around ``fitz.Document`` exposing exactly what the
extraction router needs: page text, directly-placed raster images,
form widgets and document properties. Pages are 1-based here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterator

import fitz  # pymupdf

from .base import FormField

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_PDF_DATE = re.compile(
    r"^D:(\d{4})(\d{2})?(\d{2})?(\d{2})?(\d{2})?(\d{2})?"
    r"(?:([Zz+\-])(\d{2})?'?(\d{2})?'?)?"
)

# Widget kinds reported under their AcroForm /FT names
_FIELD_TYPES = {
    fitz.PDF_WIDGET_TYPE_TEXT: "Tx",
    fitz.PDF_WIDGET_TYPE_BUTTON: "Btn",
    fitz.PDF_WIDGET_TYPE_CHECKBOX: "Btn",
    fitz.PDF_WIDGET_TYPE_RADIOBUTTON: "Btn",
    fitz.PDF_WIDGET_TYPE_COMBOBOX: "Ch",
    fitz.PDF_WIDGET_TYPE_LISTBOX: "Ch",
    fitz.PDF_WIDGET_TYPE_SIGNATURE: "Sig",
}


@dataclass
class EmbeddedImage:
    """Raw bytes of an image object placed on a page."""

    xref: int
    data: bytes
    ext: str


def parse_pdf_date(value: str | None) -> str | None:
    """
    Convert a PDF date string (``D:YYYYMMDDHHmmSSOHH'mm'``) to ``YYYY-MM-DD HH:MM:SS``.

    The timestamp is shifted to local time, the way document properties are
    usually displayed. Unparseable values are returned unchanged.
    """
    if not value:
        return None

    match = _PDF_DATE.match(value.strip())
    if not match:
        return value

    year, month, day, hour, minute, second, sign, tz_hour, tz_minute = match.groups()
    try:
        moment = datetime(
            int(year),
            int(month or 1),
            int(day or 1),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
        )
    except ValueError:
        return value

    if sign is None:
        return moment.strftime(DATE_FORMAT)

    offset = timedelta(hours=int(tz_hour or 0), minutes=int(tz_minute or 0))
    if sign == "-":
        offset = -offset
    aware = moment.replace(tzinfo=timezone(offset))
    return aware.astimezone().strftime(DATE_FORMAT)


class PdfDocument:
    """
    An open PDF document.

    Use as a context manager so the underlying handle is released on
    every exit path:

        >>> with PdfDocument.open("report.pdf") as doc:
        ...     print(doc.page_count)
    """

    def __init__(self, doc: fitz.Document) -> None:
        self._doc = doc

    @classmethod
    def open(cls, path: str | Path) -> PdfDocument:
        return cls(fitz.open(str(path)))

    def __enter__(self) -> PdfDocument:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if not self._doc.is_closed:
            self._doc.close()

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def page_text(self, page_number: int) -> str:
        """Plain text of a single page."""
        return self._doc[page_number - 1].get_text()

    def page_images(self, page_number: int) -> Iterator[EmbeddedImage]:
        """
        Yield the raster images placed directly on a page.

        Images that live inside form XObjects are not unpacked; only
        the page's own resources are visited.
        """
        page = self._doc[page_number - 1]
        for info in page.get_images(full=True):
            xref, referencer = info[0], info[-1]
            if referencer != 0:
                # Nested inside a form XObject
                continue
            extracted = self._doc.extract_image(xref)
            if not extracted:
                continue
            yield EmbeddedImage(xref=xref, data=extracted["image"], ext=extracted["ext"])

    def form_fields(self) -> list[FormField]:
        """
        All interactive form fields (empty when the document has no form).

        Fields are found through their widget annotations, so a field with
        no widget on any page is not listed. Radio groups and other fields
        with several widgets are reported once, from the first widget.
        """
        if not self._doc.is_form_pdf:
            return []

        fields: list[FormField] = []
        seen: set[str] = set()
        for page in self._doc:
            for widget in page.widgets() or []:
                if widget.field_name in seen:
                    continue
                seen.add(widget.field_name)
                flags = widget.field_flags or 0
                value = widget.field_value
                fields.append(
                    FormField(
                        name=widget.field_name,
                        type=_FIELD_TYPES.get(widget.field_type, widget.field_type_string),
                        value=None if value is None else str(value),
                        readonly=bool(flags & fitz.PDF_FIELD_IS_READ_ONLY),
                        required=bool(flags & fitz.PDF_FIELD_IS_REQUIRED),
                    )
                )
        return fields

    def properties(self) -> dict[str, Any]:
        """Document information dictionary plus structural facts."""
        info = self._doc.metadata or {}
        properties: dict[str, Any] = {
            "title": info.get("title") or None,
            "author": info.get("author") or None,
            "subject": info.get("subject") or None,
            "keywords": info.get("keywords") or None,
            "creator": info.get("creator") or None,
            "producer": info.get("producer") or None,
            "creationDate": parse_pdf_date(info.get("creationDate")),
            "modificationDate": parse_pdf_date(info.get("modDate")),
            "pageCount": self.page_count,
            "encrypted": bool(self._doc.is_encrypted or info.get("encryption")),
            "version": (info.get("format") or "").replace("PDF", "").strip() or None,
        }
        return properties

    def to_html(self) -> str:
        """Concatenate PyMuPDF's per-page HTML into one document body."""
        return "\n".join(page.get_text("html") for page in self._doc)

    def to_text(self) -> str:
        return "".join(page.get_text() for page in self._doc)
