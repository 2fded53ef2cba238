"""Base types for PDF extraction results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ExtractionKind(str, Enum):
    """The closed set of extraction operations."""

    TEXT = "text"
    IMAGES = "images"
    TABLES = "tables"
    FORMS = "forms"
    METADATA = "metadata"
    FULL = "full"

    @property
    def subdirectory(self) -> str | None:
        """Artifact subdirectory under the output root (None = the root itself)."""
        return None if self is ExtractionKind.FULL else self.value


class OutputFormat(str, Enum):
    """Response encodings."""

    JSON = "json"
    MARKDOWN = "markdown"
    PLAINTEXT = "plaintext"


class ImageFormat(str, Enum):
    """Encodings for saved images."""

    PNG = "png"
    JPG = "jpg"
    GIF = "gif"


@dataclass(frozen=True)
class ExtractionRequest:
    """One extraction call, as received from a caller."""

    file_path: str
    kind: ExtractionKind
    output_format: OutputFormat = OutputFormat.JSON
    page_range: str = "all"
    image_format: ImageFormat = ImageFormat.PNG


@dataclass
class Table:
    """A candidate table found on one page."""

    page: int
    row_count: int
    data: list[str]
    headers: list[str] | None = None
    rows: list[list[str]] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "page": self.page,
            "rowCount": self.row_count,
            "data": self.data,
        }
        if self.headers is not None:
            result["headers"] = self.headers
        if self.rows is not None:
            result["rows"] = self.rows
        return result


@dataclass
class FormField:
    """An interactive form field."""

    name: str
    type: str
    value: str | None
    readonly: bool
    required: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "type": self.type,
            "value": self.value,
            "readonly": self.readonly,
            "required": self.required,
        }


@dataclass
class TextResult:
    """Per-page text plus the banner-delimited full text."""

    page_texts: dict[int, str]
    full_text: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "pageCount": len(self.page_texts),
            "pageTexts": {str(page): text for page, text in self.page_texts.items()},
            "fullText": self.full_text,
        }


@dataclass
class ImageResult:
    """Saved image paths in encounter order."""

    images: list[str]
    pages_scanned: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "imageCount": len(self.images),
            "pageCount": self.pages_scanned,
            "images": self.images,
        }


@dataclass
class TableResult:
    """All tables of the selected pages, in page order."""

    tables: list[Table] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tableCount": len(self.tables),
            "tables": [t.to_dict() for t in self.tables],
        }


@dataclass
class FormResult:
    """Form fields keyed by fully-qualified name."""

    fields: dict[str, FormField] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fieldCount": len(self.fields),
            "fields": {name: f.to_dict() for name, f in self.fields.items()},
        }


@dataclass
class MetadataResult:
    """Document properties, detector metadata and filesystem attributes."""

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"metadata": self.metadata}
