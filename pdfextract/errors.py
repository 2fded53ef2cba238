"""
Error taxonomy for extraction requests.

Every failure that reaches a caller carries a stable, machine-readable
``ErrorCode`` plus a human-readable message.

Usage:
    from pdfextract.errors import InvalidRangeError

    raise InvalidRangeError("Invalid page range: start > end")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Coarse error-kind tags reported in error envelopes."""

    # Input validation
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    NOT_A_FILE = "NOT_A_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_FILE_TYPE = "UNSUPPORTED_FILE_TYPE"

    # Request shape
    INVALID_RANGE = "INVALID_RANGE"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    MISSING_PARAMETER = "MISSING_PARAMETER"
    UNKNOWN_OPERATION = "UNKNOWN_OPERATION"

    # Parsing / IO
    PARSE_FAILURE = "PARSE_FAILURE"


class ExtractorError(Exception):
    """Base exception with error code support."""

    code: ErrorCode = ErrorCode.PARSE_FAILURE

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the error envelope returned to callers."""
        return {
            "status": "error",
            "errorType": self.code.value,
            "message": self.message,
        }


class InputFileNotFoundError(ExtractorError, FileNotFoundError):
    """The input path does not exist."""

    code = ErrorCode.FILE_NOT_FOUND

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"PDF file not found: {path}", {"path": path})


class NotAFileError(ExtractorError):
    """The input path exists but is not a regular file."""

    code = ErrorCode.NOT_A_FILE

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path is not a file: {path}", {"path": path})


class FileTooLargeError(ExtractorError):
    """The input file exceeds the configured size limit."""

    code = ErrorCode.FILE_TOO_LARGE

    def __init__(self, path: str, size: int, limit: int) -> None:
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(
            "File size exceeds maximum allowed size: "
            f"{size // 1024 // 1024}MB > {limit // 1024 // 1024}MB",
            {"path": path, "size": size, "limit": limit},
        )


class UnsupportedFileTypeError(ExtractorError):
    """The input file does not carry a .pdf extension."""

    code = ErrorCode.UNSUPPORTED_FILE_TYPE

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File is not a PDF: {path}", {"path": path})


class InvalidRangeError(ExtractorError, ValueError):
    """A page selector could not be parsed."""

    code = ErrorCode.INVALID_RANGE


class UnsupportedFormatError(ExtractorError, ValueError):
    """An output encoding or image format name is not recognised."""

    code = ErrorCode.UNSUPPORTED_FORMAT


class MissingParameterError(ExtractorError):
    """A required tool parameter is absent or blank."""

    code = ErrorCode.MISSING_PARAMETER

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"{parameter} is required", {"parameter": parameter})


class UnknownOperationError(ExtractorError):
    """No tool is registered under the requested name."""

    code = ErrorCode.UNKNOWN_OPERATION

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}", {"name": name})


class ParseFailureError(ExtractorError):
    """The document parser or the filesystem raised a fault."""

    code = ErrorCode.PARSE_FAILURE
