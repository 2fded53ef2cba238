"""
Tool catalogue.

Names, descriptions and JSON input schemas for every operation the
dispatcher accepts. The MCP server lists these verbatim; the HTTP front
door exposes them under ``GET /api/tools``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

OUTPUT_FORMATS = ["json", "markdown", "plaintext"]
IMAGE_FORMATS = ["png", "jpg", "gif"]


@dataclass(frozen=True)
class ToolDefinition:
    """One callable operation."""

    name: str
    description: str
    properties: dict[str, dict[str, Any]] = field(default_factory=dict)
    required: tuple[str, ...] = ()

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": self.properties,
            "required": list(self.required),
        }

    @property
    def defaults(self) -> dict[str, Any]:
        """Declared defaults of the optional parameters."""
        return {
            key: prop["default"]
            for key, prop in self.properties.items()
            if "default" in prop and key not in self.required
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


_FILE_PATH = {
    "type": "string",
    "description": "Path to the PDF file",
}
_OUTPUT_FORMAT = {
    "type": "string",
    "enum": OUTPUT_FORMATS,
    "description": "Output format (default: json)",
    "default": "json",
}
_PAGE_RANGE = {
    "type": "string",
    "description": "Pages to process, e.g. 'all', '1-5', '1,3,5' (default: all)",
    "default": "all",
}
_IMAGE_FORMAT = {
    "type": "string",
    "enum": IMAGE_FORMATS,
    "description": "Format for saved images (default: png)",
    "default": "png",
}
_FILENAME = {
    "type": "string",
    "description": "Name of the file (must be in the files-to-extract directory)",
}


TOOLS: tuple[ToolDefinition, ...] = (
    # === PDF extraction (arbitrary paths) ===
    ToolDefinition(
        name="extract-pdf-text",
        description="Extract text content from a PDF, page by page",
        properties={
            "filePath": _FILE_PATH,
            "outputFormat": _OUTPUT_FORMAT,
            "pageRange": _PAGE_RANGE,
        },
        required=("filePath",),
    ),
    ToolDefinition(
        name="extract-pdf-images",
        description="Extract embedded images from a PDF and save them as image files",
        properties={
            "filePath": _FILE_PATH,
            "outputFormat": _OUTPUT_FORMAT,
            "imageFormat": _IMAGE_FORMAT,
            "pageRange": _PAGE_RANGE,
        },
        required=("filePath",),
    ),
    ToolDefinition(
        name="extract-pdf-tables",
        description="Detect tab-delimited tables in the text of a PDF",
        properties={
            "filePath": _FILE_PATH,
            "outputFormat": _OUTPUT_FORMAT,
            "pageRange": _PAGE_RANGE,
        },
        required=("filePath",),
    ),
    ToolDefinition(
        name="extract-pdf-forms",
        description="Extract interactive form fields and their values from a PDF",
        properties={
            "filePath": _FILE_PATH,
            "outputFormat": _OUTPUT_FORMAT,
        },
        required=("filePath",),
    ),
    ToolDefinition(
        name="extract-pdf-metadata",
        description="Extract document properties and file information from a PDF",
        properties={
            "filePath": _FILE_PATH,
            "outputFormat": _OUTPUT_FORMAT,
        },
        required=("filePath",),
    ),
    ToolDefinition(
        name="extract-pdf-full",
        description="Run every extraction (text, images, tables, forms, metadata) and merge the results",
        properties={
            "filePath": _FILE_PATH,
            "outputFormat": _OUTPUT_FORMAT,
            "pageRange": _PAGE_RANGE,
            "imageFormat": _IMAGE_FORMAT,
        },
        required=("filePath",),
    ),
    # === Working-directory tools (bare filenames) ===
    ToolDefinition(
        name="extract-to-html",
        description="Extract content from a file in the files-to-extract directory and convert it to HTML",
        properties={"filename": _FILENAME},
        required=("filename",),
    ),
    ToolDefinition(
        name="extract-text",
        description="Extract plain text content from a file in the files-to-extract directory",
        properties={"filename": _FILENAME},
        required=("filename",),
    ),
    ToolDefinition(
        name="list-files",
        description="List all files available in the files-to-extract directory",
    ),
    ToolDefinition(
        name="get-file-metadata",
        description="Get detailed metadata information about a file in the files-to-extract directory",
        properties={"filename": _FILENAME},
        required=("filename",),
    ),
)

TOOLS_BY_NAME: dict[str, ToolDefinition] = {tool.name: tool for tool in TOOLS}
