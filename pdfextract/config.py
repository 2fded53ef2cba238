"""
Runtime configuration for pdfextract.

Settings are read once at startup (environment variables, then explicit
overrides from the CLI) into an immutable ExtractorConfig that is handed
to the router, the workspace, the dispatcher and the servers.

Environment:
    PDF_OUTPUT_DIRECTORY   Root of the artifact tree (default: extracted_data)
    PDF_MAX_FILE_SIZE      Largest accepted input, e.g. 50MB (default: 50MB)
    PDF_MAX_PAGES          Page cap per document (default: 1000)
    FILES_DIRECTORY        Working directory of the file tools (default: files-to-extract)
    SERVER_PORT            HTTP port (default: 45451)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024
DEFAULT_MAX_PAGES = 1000
DEFAULT_SERVER_PORT = 45451

_SIZE_SUFFIXES = {
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}


@dataclass(frozen=True)
class ExtractorConfig:
    """
    Immutable settings shared by every request.

    Attributes:
        output_directory: Root directory for extraction artifacts
        max_file_size: Largest accepted input file, in bytes
        max_pages: Maximum number of pages processed per document
        files_directory: Working directory for the filename-based tools
        server_port: Port for the HTTP front door
    """

    output_directory: Path = Path("extracted_data")
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_pages: int = DEFAULT_MAX_PAGES
    files_directory: Path = Path("files-to-extract")
    server_port: int = DEFAULT_SERVER_PORT


def parse_size(value: str | int) -> int:
    """
    Parse a size such as ``"512"``, ``"10KB"``, ``"50MB"`` or ``"2gb"`` into bytes.

    Raises:
        ValueError: If the value is not a number with an optional KB/MB/GB suffix
    """
    if isinstance(value, int):
        return value

    text = value.strip().upper()
    for suffix, multiplier in _SIZE_SUFFIXES.items():
        if text.endswith(suffix):
            return int(text[: -len(suffix)].strip()) * multiplier
    return int(text)


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer value for %s: %r, using %d", key, raw, default)
        return default


def _env_size(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None:
        return default
    try:
        return parse_size(raw)
    except ValueError:
        logger.warning("Invalid size value for %s: %r, using %d", key, raw, default)
        return default


def load_config(
    env: Mapping[str, str] | None = None,
    *,
    output_directory: str | Path | None = None,
    max_file_size: str | int | None = None,
    max_pages: int | None = None,
    files_directory: str | Path | None = None,
    server_port: int | None = None,
) -> ExtractorConfig:
    """
    Build the configuration from the environment plus explicit overrides.

    Args:
        env: Environment mapping (defaults to os.environ)
        output_directory: Override for the artifact root
        max_file_size: Override for the size limit (bytes or suffixed string)
        max_pages: Override for the page cap
        files_directory: Override for the file tools' working directory
        server_port: Override for the HTTP port

    Returns:
        Frozen ExtractorConfig
    """
    if env is None:
        env = os.environ

    config = ExtractorConfig(
        output_directory=Path(env.get("PDF_OUTPUT_DIRECTORY", "extracted_data")),
        max_file_size=_env_size(env, "PDF_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE),
        max_pages=_env_int(env, "PDF_MAX_PAGES", DEFAULT_MAX_PAGES),
        files_directory=Path(env.get("FILES_DIRECTORY", "files-to-extract")),
        server_port=_env_int(env, "SERVER_PORT", DEFAULT_SERVER_PORT),
    )

    overrides: dict[str, object] = {}
    if output_directory is not None:
        overrides["output_directory"] = Path(output_directory)
    if max_file_size is not None:
        overrides["max_file_size"] = parse_size(max_file_size)
    if max_pages is not None:
        overrides["max_pages"] = max_pages
    if files_directory is not None:
        overrides["files_directory"] = Path(files_directory)
    if server_port is not None:
        overrides["server_port"] = server_port

    if overrides:
        config = replace(config, **overrides)

    logger.debug("Configuration loaded: %s", config)
    return config
