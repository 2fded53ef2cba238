"""Artifact file operations.

Every extraction writes its result under the output root:

    <root>/<kind>/<base>_<kind>_<epochMillis>.<ext>     (text, tables, ...)
    <root>/images/<base>_page<P>_img<K>_<epochMillis>.<fmt>
    <root>/<base>_full_<epochMillis>.json
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from ..extract.base import ExtractionKind

logger = logging.getLogger(__name__)

SUBDIRECTORIES: tuple[str, ...] = ("images", "text", "tables", "forms", "metadata")


def epoch_millis() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def base_name(file_path: str | Path) -> str:
    """File name without its last extension (``report.v2.pdf`` -> ``report.v2``)."""
    name = Path(file_path).name
    dot = name.rfind(".")
    return name[:dot] if dot > 0 else name


def ensure_output_tree(root: Path) -> None:
    """
    Create the output root and its fixed subdirectories.

    Failures are logged, not raised: a missing subdirectory surfaces later
    as a write failure of the operation that needs it.
    """
    for sub in SUBDIRECTORIES:
        try:
            (root / sub).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create output directory %s: %s", root / sub, e)


def artifact_path(
    root: Path,
    kind: ExtractionKind,
    source: str | Path,
    millis: int,
    ext: str,
) -> Path:
    """Build the artifact path for one extraction result."""
    filename = f"{base_name(source)}_{kind.value}_{millis}.{ext}"
    sub = kind.subdirectory
    return root / sub / filename if sub else root / filename


def image_path(root: Path, source: str | Path, page: int, index: int, millis: int, ext: str) -> Path:
    """Build the path of one saved image."""
    return root / "images" / f"{base_name(source)}_page{page}_img{index}_{millis}.{ext}"


def write_bytes(path: Path, data: bytes) -> Path:
    """
    Write an artifact, removing any partial file if the write fails.

    Returns:
        The written path
    """
    try:
        path.write_bytes(data)
    except OSError:
        path.unlink(missing_ok=True)
        raise
    logger.debug("Wrote artifact %s (%d bytes)", path, len(data))
    return path


def write_text(path: Path, text: str) -> Path:
    return write_bytes(path, text.encode("utf-8"))


def write_json(path: Path, payload: Any) -> Path:
    """Write a pretty-printed JSON artifact."""
    return write_text(path, json.dumps(payload, indent=2, ensure_ascii=False, default=str))
