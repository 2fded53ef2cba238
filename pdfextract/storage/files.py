"""Working-directory file operations.

The filename-based tools (list-files, get-file-metadata, extract-text,
extract-to-html) never take arbitrary paths: every name is resolved
under one fixed directory, which is created on first use.
"""

from __future__ import annotations

import html as htmllib
import logging
import os
from pathlib import Path
from typing import Any

from ..errors import InputFileNotFoundError, ParseFailureError
from ..extract import PdfDocument, content_metadata, detect_mime_type

logger = logging.getLogger(__name__)

HTML_STYLE = """
<style>
    body { font-family: Arial, sans-serif; line-height: 1.6; margin: 20px; }
    h1, h2, h3 { color: #333; }
    p { margin-bottom: 10px; }
    table { border-collapse: collapse; width: 100%; }
    th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
    img { max-width: 100%; height: auto; }
</style>
"""


def enhance_html(raw_html: str) -> str:
    """Inject the readability stylesheet into an HTML document."""
    if "<head>" in raw_html:
        return raw_html.replace("<head>", "<head>" + HTML_STYLE, 1)
    return raw_html.replace("<html>", "<html><head>" + HTML_STYLE + "</head>", 1)


class DocumentWorkspace:
    """
    Files available for extraction by bare filename.

    Example:
        >>> workspace = DocumentWorkspace(Path("files-to-extract"))
        >>> workspace.list_files()["count"]
        3
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _ensure_directory(self) -> bool:
        """Create the directory if needed. Returns True if it was just created."""
        if self.directory.exists():
            return False
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.info("Created directory: %s", self.directory)
        return True

    def resolve(self, filename: str) -> Path:
        """
        Resolve a bare filename to an existing file inside the directory.

        Raises:
            InputFileNotFoundError: If the file is missing or escapes the directory
        """
        self._ensure_directory()
        root = self.directory.resolve()
        path = (root / filename).resolve()
        if root not in path.parents or not path.is_file():
            raise InputFileNotFoundError(filename, f"File not found: {filename}")
        if not os.access(path, os.R_OK):
            raise InputFileNotFoundError(filename, f"Cannot read file: {filename}")
        return path

    def list_files(self) -> dict[str, Any]:
        """List the files available for extraction."""
        absolute = str(self.directory.resolve())

        if self._ensure_directory():
            return {
                "files": {},
                "count": 0,
                "message": f"Directory created: {self.directory}",
                "path": absolute,
            }

        entries = sorted(p for p in self.directory.iterdir() if p.is_file())
        if not entries:
            return {
                "files": {},
                "count": 0,
                "message": f"No files found in {self.directory}",
                "path": absolute,
            }

        files: dict[str, Any] = {}
        for entry in entries:
            stat = entry.stat()
            try:
                mime_type = detect_mime_type(entry)
            except OSError:
                mime_type = "unknown"
            files[entry.name] = {
                "size": stat.st_size,
                "lastModified": int(stat.st_mtime * 1000),
                "canRead": os.access(entry, os.R_OK),
                "mimeType": mime_type,
            }

        return {"files": files, "count": len(files), "path": absolute}

    def file_metadata(self, filename: str) -> dict[str, Any]:
        """Detector metadata plus document properties for one file."""
        path = self.resolve(filename)
        try:
            metadata = content_metadata(path)
        except Exception as e:
            raise ParseFailureError(f"Failed to read metadata of {filename}: {e}") from e

        return {
            "filename": filename,
            "metadata": metadata,
            "fileSize": path.stat().st_size,
            "path": str(path),
        }

    def extract_text(self, filename: str) -> dict[str, Any]:
        """Plain text of a document."""
        path = self.resolve(filename)
        media_type = detect_mime_type(path)
        try:
            with PdfDocument.open(path) as doc:
                text = doc.to_text()
        except Exception as e:
            raise ParseFailureError(f"Failed to extract text from {filename}: {e}") from e

        return {
            "filename": filename,
            "text": text,
            "mediaType": media_type,
            "fileSize": path.stat().st_size,
        }

    def extract_html(self, filename: str) -> dict[str, Any]:
        """A styled HTML rendition of a document, with its properties."""
        path = self.resolve(filename)
        try:
            with PdfDocument.open(path) as doc:
                body = doc.to_html()
                properties = doc.properties()
            metadata = content_metadata(path)
        except Exception as e:
            raise ParseFailureError(f"Failed to convert {filename} to HTML: {e}") from e

        title = htmllib.escape(properties.get("title") or path.name)
        html = enhance_html(
            f"<html><head><title>{title}</title></head>\n<body>\n{body}\n</body></html>"
        )

        return {
            "filename": filename,
            "html": html,
            "contentType": metadata.get("Content-Type"),
            "title": properties.get("title"),
            "author": properties.get("author"),
            "created": properties.get("creationDate"),
            "modified": properties.get("modificationDate"),
            "fileSize": path.stat().st_size,
            "metadata": metadata,
        }
