"""
pdfextract tools module.

These are the operations agents and HTTP clients can call by name.

Tools are organized into categories:
- PDF extraction: extract-pdf-{text,images,tables,forms,metadata,full} (any path)
- Working directory: extract-to-html, extract-text, list-files, get-file-metadata
"""

from .definitions import TOOLS, TOOLS_BY_NAME, ToolDefinition
from .dispatch import (
    EXTRACTION_TOOLS,
    ToolDispatcher,
    ToolResponse,
    bind_parameters,
    error_response,
    resolve_operation,
)

__all__ = [
    # Catalogue
    "TOOLS",
    "TOOLS_BY_NAME",
    "ToolDefinition",
    # Dispatch
    "EXTRACTION_TOOLS",
    "ToolDispatcher",
    "ToolResponse",
    "bind_parameters",
    "error_response",
    "resolve_operation",
]
