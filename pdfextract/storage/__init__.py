"""
pdfextract storage layer.

All filesystem writes and working-directory lookups live here:
- artifacts: extraction results persisted under the output root
- files: the fixed directory served by the filename-based tools

Usage:
    from pdfextract.storage import artifact_path, write_json

    path = artifact_path(root, ExtractionKind.TABLES, "report.pdf", epoch_millis(), "json")
    write_json(path, {"tables": []})
"""

from .artifacts import (
    SUBDIRECTORIES,
    artifact_path,
    base_name,
    ensure_output_tree,
    epoch_millis,
    image_path,
    write_bytes,
    write_json,
    write_text,
)
from .files import DocumentWorkspace, enhance_html

__all__ = [
    "SUBDIRECTORIES",
    "artifact_path",
    "base_name",
    "ensure_output_tree",
    "epoch_millis",
    "image_path",
    "write_bytes",
    "write_json",
    "write_text",
    "DocumentWorkspace",
    "enhance_html",
]
