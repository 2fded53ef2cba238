"""
Tool dispatcher.

Maps an operation name plus a loosely-typed parameter bag onto one
router or workspace call. The dispatcher never raises: every failure is
turned into an error envelope with the response's error flag set.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..errors import (
    ExtractorError,
    MissingParameterError,
    ParseFailureError,
    UnknownOperationError,
)
from ..extract.base import ExtractionKind, ExtractionRequest
from ..extract.image import parse_image_format
from ..formatting import parse_output_format
from ..router import ExtractionRouter
from ..storage import DocumentWorkspace
from .definitions import TOOLS_BY_NAME, ToolDefinition

logger = logging.getLogger(__name__)

EXTRACTION_TOOLS: dict[str, ExtractionKind] = {
    "extract-pdf-text": ExtractionKind.TEXT,
    "extract-pdf-images": ExtractionKind.IMAGES,
    "extract-pdf-tables": ExtractionKind.TABLES,
    "extract-pdf-forms": ExtractionKind.FORMS,
    "extract-pdf-metadata": ExtractionKind.METADATA,
    "extract-pdf-full": ExtractionKind.FULL,
}


@dataclass(frozen=True)
class ToolResponse:
    """A single text payload plus the error flag."""

    text: str
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"isError": self.is_error, "content": self.text}


def error_response(error: ExtractorError) -> ToolResponse:
    """Render an error envelope."""
    return ToolResponse(json.dumps(error.to_dict(), indent=2, ensure_ascii=False), is_error=True)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_operation(name: str) -> ToolDefinition:
    """
    Look up a tool by name.

    Raises:
        UnknownOperationError: If no tool has that name
    """
    tool = TOOLS_BY_NAME.get(name)
    if tool is None:
        raise UnknownOperationError(name)
    return tool


def bind_parameters(tool: ToolDefinition, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Check required parameters and fill in declared defaults.

    Blank optional parameters count as absent.

    Raises:
        MissingParameterError: If a required parameter is absent or blank
    """
    arguments = dict(arguments or {})
    for key in tool.required:
        if _is_blank(arguments.get(key)):
            raise MissingParameterError(key)

    params = dict(tool.defaults)
    for key, value in arguments.items():
        if not _is_blank(value):
            params[key] = value
    return params


class ToolDispatcher:
    """
    Stateless request-to-response mapper shared by every transport.

    Example:
        >>> dispatcher = ToolDispatcher(router, workspace)
        >>> response = dispatcher.dispatch("extract-pdf-text", {"filePath": "a.pdf"})
        >>> response.is_error
        False
    """

    def __init__(self, router: ExtractionRouter, workspace: DocumentWorkspace) -> None:
        self.router = router
        self.workspace = workspace
        self._file_tools: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
            "extract-to-html": self._extract_to_html,
            "extract-text": self._extract_text,
            "list-files": self._list_files,
            "get-file-metadata": self._get_file_metadata,
        }

    def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        """
        Run one tool call.

        Args:
            name: Tool name, e.g. "extract-pdf-text"
            arguments: Parameter bag from the caller

        Returns:
            ToolResponse with the formatted body, or an error envelope
        """
        try:
            tool = resolve_operation(name)
            params = bind_parameters(tool, arguments)
            logger.info("Tool call: %s", name)

            if name in EXTRACTION_TOOLS:
                return ToolResponse(self.router.extract(self._request(name, params)))

            body = {"status": "success", **self._file_tools[name](params)}
            return ToolResponse(json.dumps(body, indent=2, ensure_ascii=False, default=str))

        except ExtractorError as e:
            logger.warning("Tool %s failed: [%s] %s", name, e.code.value, e.message)
            return error_response(e)
        except Exception as e:
            logger.error("Tool %s failed unexpectedly: %s", name, e, exc_info=True)
            return error_response(ParseFailureError(str(e)))

    def _request(self, name: str, params: dict[str, Any]) -> ExtractionRequest:
        return ExtractionRequest(
            file_path=str(params["filePath"]),
            kind=EXTRACTION_TOOLS[name],
            output_format=parse_output_format(str(params.get("outputFormat", "json"))),
            page_range=str(params.get("pageRange", "all")),
            image_format=parse_image_format(str(params.get("imageFormat", "png"))),
        )

    # -------------------------------------------------------------------------
    # Working-directory tools
    # -------------------------------------------------------------------------

    def _extract_to_html(self, params: dict[str, Any]) -> dict[str, Any]:
        filename = str(params["filename"])
        result = self.workspace.extract_html(filename)
        return {
            "filename": filename,
            "contentType": result["contentType"],
            "htmlLength": len(result["html"]),
            "html": result["html"],
        }

    def _extract_text(self, params: dict[str, Any]) -> dict[str, Any]:
        filename = str(params["filename"])
        result = self.workspace.extract_text(filename)
        return {
            "filename": filename,
            "mediaType": result["mediaType"],
            "textLength": len(result["text"]),
            "text": result["text"],
        }

    def _list_files(self, params: dict[str, Any]) -> dict[str, Any]:
        return self.workspace.list_files()

    def _get_file_metadata(self, params: dict[str, Any]) -> dict[str, Any]:
        filename = str(params["filename"])
        result = self.workspace.file_metadata(filename)
        return {
            "filename": filename,
            "fileSize": result["fileSize"],
            "metadata": result["metadata"],
        }
