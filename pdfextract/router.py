"""
Extraction router.

One operation per extraction kind (text, images, tables, forms,
metadata) plus the composite full extraction. Every operation follows
the same shape:

    validate input  ->  open document  ->  extract  ->  persist artifact  ->  format

Validation runs before the document is opened, and nothing is persisted
unless extraction completed. Parser and filesystem faults surface as
ParseFailureError with the original message preserved.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from .config import ExtractorConfig
from .errors import (
    ExtractorError,
    FileTooLargeError,
    InputFileNotFoundError,
    NotAFileError,
    ParseFailureError,
    UnsupportedFileTypeError,
)
from .extract import (
    DATE_FORMAT,
    ExtractionKind,
    ExtractionRequest,
    FormResult,
    ImageFormat,
    ImageResult,
    MetadataResult,
    OutputFormat,
    PdfDocument,
    TableResult,
    TextResult,
    content_metadata,
    encode_image,
    parse_image_format,
)
from .formatting import format_result, parse_output_format
from .pages import resolve_pages
from .storage import (
    artifact_path,
    ensure_output_tree,
    epoch_millis,
    image_path,
    write_bytes,
    write_json,
    write_text,
)
from .tables import detect_tables

logger = logging.getLogger(__name__)

__all__ = ["ExtractionRouter"]

# Sub-operations of a full extraction, in execution order
FULL_SECTIONS: tuple[ExtractionKind, ...] = (
    ExtractionKind.TEXT,
    ExtractionKind.IMAGES,
    ExtractionKind.TABLES,
    ExtractionKind.FORMS,
    ExtractionKind.METADATA,
)


@contextmanager
def _parse_guard(action: str) -> Iterator[None]:
    """Re-raise unexpected faults as ParseFailureError."""
    try:
        yield
    except ExtractorError:
        raise
    except Exception as e:
        logger.error("Failed to %s: %s", action, e, exc_info=True)
        raise ParseFailureError(f"Failed to {action}: {e}") from e


class ExtractionRouter:
    """
    Runs extraction operations against PDF files on disk.

    Example:
        >>> router = ExtractionRouter(load_config())
        >>> print(router.extract_text("report.pdf", output_format="markdown", page_range="1-3"))
    """

    def __init__(
        self,
        config: ExtractorConfig,
        *,
        open_document: Callable[[Path], PdfDocument] = PdfDocument.open,
    ) -> None:
        """
        Initialize the router and create the output directory tree.

        Args:
            config: Immutable runtime configuration
            open_document: Factory returning an open document for a path
        """
        self.config = config
        self._open_document = open_document
        ensure_output_tree(config.output_directory)

    @property
    def output_root(self) -> Path:
        return self.config.output_directory

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def extract(self, request: ExtractionRequest) -> str:
        """Run the operation named by ``request.kind``."""
        handlers: dict[ExtractionKind, Callable[[], str]] = {
            ExtractionKind.TEXT: lambda: self.extract_text(
                request.file_path, request.output_format, request.page_range
            ),
            ExtractionKind.IMAGES: lambda: self.extract_images(
                request.file_path, request.output_format, request.image_format, request.page_range
            ),
            ExtractionKind.TABLES: lambda: self.extract_tables(
                request.file_path, request.output_format, request.page_range
            ),
            ExtractionKind.FORMS: lambda: self.extract_form_fields(
                request.file_path, request.output_format
            ),
            ExtractionKind.METADATA: lambda: self.extract_metadata(
                request.file_path, request.output_format
            ),
            ExtractionKind.FULL: lambda: self.extract_full(
                request.file_path, request.output_format, request.page_range, request.image_format
            ),
        }
        return handlers[request.kind]()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_file(self, file_path: str) -> Path:
        """
        Check that a path names an acceptable PDF.

        Raises:
            InputFileNotFoundError: Path does not exist
            NotAFileError: Path is a directory or special file
            FileTooLargeError: File exceeds the configured size limit
            UnsupportedFileTypeError: File name does not end in .pdf
        """
        path = Path(file_path)
        if not path.exists():
            raise InputFileNotFoundError(file_path)
        if not path.is_file():
            raise NotAFileError(file_path)

        size = path.stat().st_size
        if size > self.config.max_file_size:
            raise FileTooLargeError(file_path, size, self.config.max_file_size)

        if not path.name.lower().endswith(".pdf"):
            raise UnsupportedFileTypeError(file_path)
        return path

    def _pages(self, doc: PdfDocument, page_range: str | None) -> list[int]:
        return resolve_pages(page_range or "all", doc.page_count, self.config.max_pages)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def extract_text(
        self,
        file_path: str,
        output_format: str | OutputFormat = OutputFormat.JSON,
        page_range: str = "all",
    ) -> str:
        """
        Extract plain text page by page.

        Args:
            file_path: Path to the PDF
            output_format: Response encoding (json, markdown, plaintext)
            page_range: Page selector, e.g. "all" or "1,3-5"

        Returns:
            Formatted result body
        """
        fmt = parse_output_format(output_format)
        path = self.validate_file(file_path)
        logger.info("Extracting text from %s (pages: %s)", file_path, page_range)

        with _parse_guard("extract text from PDF"):
            with self._open_document(path) as doc:
                pages = self._pages(doc, page_range)
                page_texts: dict[int, str] = {}
                parts: list[str] = []
                for page in pages:
                    text = doc.page_text(page)
                    page_texts[page] = text
                    parts.append(f"=== Page {page} ===\n{text}\n\n")

            result = TextResult(page_texts=page_texts, full_text="".join(parts))
            output = artifact_path(self.output_root, ExtractionKind.TEXT, path, epoch_millis(), "txt")
            write_text(output, result.full_text)

        return format_result(ExtractionKind.TEXT, result.to_dict(), str(output), fmt)

    def extract_images(
        self,
        file_path: str,
        output_format: str | OutputFormat = OutputFormat.JSON,
        image_format: str | ImageFormat = ImageFormat.PNG,
        page_range: str = "all",
    ) -> str:
        """
        Save the raster images placed on the selected pages.

        Images are written as ``<base>_page<P>_img<K>_<millis>.<fmt>`` with K
        counting across all pages; a JSON manifest of the saved paths is the
        operation's artifact.
        """
        fmt = parse_output_format(output_format)
        img_fmt = parse_image_format(image_format)
        path = self.validate_file(file_path)
        logger.info("Extracting images from %s (pages: %s, format: %s)", file_path, page_range, img_fmt.value)

        millis = epoch_millis()
        saved: list[Path] = []
        try:
            with _parse_guard("extract images from PDF"):
                with self._open_document(path) as doc:
                    pages = self._pages(doc, page_range)
                    for page in pages:
                        for image in doc.page_images(page):
                            target = image_path(
                                self.output_root, path, page, len(saved) + 1, millis, img_fmt.value
                            )
                            write_bytes(target, encode_image(image.data, img_fmt))
                            saved.append(target)

                result = ImageResult(images=[str(p) for p in saved], pages_scanned=len(pages))
                output = artifact_path(self.output_root, ExtractionKind.IMAGES, path, millis, "json")
                write_json(output, result.to_dict())
        except Exception:
            for target in saved:
                target.unlink(missing_ok=True)
            raise

        logger.info("Saved %d images from %s", len(saved), file_path)
        return format_result(ExtractionKind.IMAGES, result.to_dict(), str(output), fmt)

    def extract_tables(
        self,
        file_path: str,
        output_format: str | OutputFormat = OutputFormat.JSON,
        page_range: str = "all",
    ) -> str:
        """Detect tab-delimited tables in the text of the selected pages."""
        fmt = parse_output_format(output_format)
        path = self.validate_file(file_path)
        logger.info("Extracting tables from %s (pages: %s)", file_path, page_range)

        with _parse_guard("extract tables from PDF"):
            result = TableResult()
            with self._open_document(path) as doc:
                for page in self._pages(doc, page_range):
                    result.tables.extend(detect_tables(doc.page_text(page), page))

            output = artifact_path(self.output_root, ExtractionKind.TABLES, path, epoch_millis(), "json")
            write_json(output, {"tables": [t.to_dict() for t in result.tables]})

        return format_result(ExtractionKind.TABLES, result.to_dict(), str(output), fmt)

    def extract_form_fields(
        self,
        file_path: str,
        output_format: str | OutputFormat = OutputFormat.JSON,
    ) -> str:
        """Read the interactive form fields of a document."""
        fmt = parse_output_format(output_format)
        path = self.validate_file(file_path)
        logger.info("Extracting form fields from %s", file_path)

        with _parse_guard("extract form fields from PDF"):
            with self._open_document(path) as doc:
                result = FormResult(fields={f.name: f for f in doc.form_fields()})

            output = artifact_path(self.output_root, ExtractionKind.FORMS, path, epoch_millis(), "json")
            write_json(output, {name: f.to_dict() for name, f in result.fields.items()})

        return format_result(ExtractionKind.FORMS, result.to_dict(), str(output), fmt)

    def extract_metadata(
        self,
        file_path: str,
        output_format: str | OutputFormat = OutputFormat.JSON,
    ) -> str:
        """Merge document properties, detector metadata and filesystem attributes."""
        fmt = parse_output_format(output_format)
        path = self.validate_file(file_path)
        logger.info("Extracting metadata from %s", file_path)

        with _parse_guard("extract metadata from PDF"):
            with self._open_document(path) as doc:
                metadata: dict[str, Any] = doc.properties()

            metadata["contentMetadata"] = content_metadata(path)

            stat = path.stat()
            metadata["fileName"] = path.name
            metadata["filePath"] = str(path.absolute())
            metadata["fileSize"] = stat.st_size
            metadata["lastModified"] = datetime.fromtimestamp(stat.st_mtime).strftime(DATE_FORMAT)

            result = MetadataResult(metadata=metadata)
            output = artifact_path(self.output_root, ExtractionKind.METADATA, path, epoch_millis(), "json")
            write_json(output, result.metadata)

        return format_result(ExtractionKind.METADATA, result.to_dict(), str(output), fmt)

    def extract_full(
        self,
        file_path: str,
        output_format: str | OutputFormat = OutputFormat.JSON,
        page_range: str = "all",
        image_format: str | ImageFormat = ImageFormat.PNG,
    ) -> str:
        """
        Run every extraction and merge their structured results.

        Sub-operations always produce JSON, which is parsed back and nested
        under the kind's name. If any of them fails, the artifacts already
        written by the earlier ones are removed and the error propagates.
        """
        fmt = parse_output_format(output_format)
        img_fmt = parse_image_format(image_format)
        path = self.validate_file(file_path)
        logger.info("Running full extraction of %s", file_path)

        steps: dict[ExtractionKind, Callable[[], str]] = {
            ExtractionKind.TEXT: lambda: self.extract_text(file_path, OutputFormat.JSON, page_range),
            ExtractionKind.IMAGES: lambda: self.extract_images(
                file_path, OutputFormat.JSON, img_fmt, page_range
            ),
            ExtractionKind.TABLES: lambda: self.extract_tables(file_path, OutputFormat.JSON, page_range),
            ExtractionKind.FORMS: lambda: self.extract_form_fields(file_path, OutputFormat.JSON),
            ExtractionKind.METADATA: lambda: self.extract_metadata(file_path, OutputFormat.JSON),
        }

        sections: dict[str, dict[str, Any]] = {}
        try:
            for kind in FULL_SECTIONS:
                sections[kind.value] = json.loads(steps[kind]())

            full: dict[str, Any] = {
                **sections,
                "extractionTimestamp": datetime.now().strftime(DATE_FORMAT),
                "sourceFile": file_path,
            }
            with _parse_guard("write full extraction"):
                output = artifact_path(self.output_root, ExtractionKind.FULL, path, epoch_millis(), "json")
                write_json(output, full)
        except Exception:
            logger.warning("Full extraction of %s failed, discarding partial artifacts", file_path)
            for section in sections.values():
                _discard_artifacts(section)
            raise

        return format_result(ExtractionKind.FULL, full, str(output), fmt)


def _discard_artifacts(section: dict[str, Any]) -> None:
    """Delete the files a completed sub-operation wrote."""
    paths = [section.get("outputFile"), *section.get("images", [])]
    for p in paths:
        if p:
            Path(p).unlink(missing_ok=True)
