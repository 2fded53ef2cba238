"""
Result formatting.

Every extraction result can be rendered three ways:

- json:      the envelope plus the full payload, pretty-printed. This is the
             lossless form; the other two are projections of it.
- markdown:  a heading, bold summary lines, then a kind-specific body.
- plaintext: the densest undecorated rendering. For text this is exactly
             the banner-delimited full text.

Renderers take the envelope as a plain dict (what ``json.loads`` returns
from the json rendering), so a re-parsed structured result renders the
same markdown and plaintext as the original.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .errors import UnsupportedFormatError
from .extract.base import ExtractionKind, OutputFormat
from .extract.pdf import DATE_FORMAT

_FORMAT_ALIASES = {"structured": OutputFormat.JSON}


def parse_output_format(name: str | OutputFormat | None) -> OutputFormat:
    """
    Resolve an output encoding name (case-insensitive; ``structured`` = ``json``).

    Raises:
        UnsupportedFormatError: If the name is not a recognised encoding
    """
    if isinstance(name, OutputFormat):
        return name
    if name is None or not name.strip():
        return OutputFormat.JSON

    key = name.strip().lower()
    if key in _FORMAT_ALIASES:
        return _FORMAT_ALIASES[key]
    try:
        return OutputFormat(key)
    except ValueError:
        raise UnsupportedFormatError(f"Unsupported output format: {name}") from None


def build_envelope(
    kind: ExtractionKind,
    payload: dict[str, Any],
    output_file: str | None,
    timestamp: str | None = None,
) -> dict[str, Any]:
    """Prefix a kind-specific payload with the common envelope fields."""
    return {
        "status": "success",
        "extractionType": kind.value,
        "timestamp": timestamp or datetime.now().strftime(DATE_FORMAT),
        "outputFile": output_file,
        **payload,
    }


def format_result(
    kind: ExtractionKind,
    payload: dict[str, Any],
    output_file: str | None,
    output_format: str | OutputFormat,
) -> str:
    """
    Wrap a payload in the envelope and render it.

    Args:
        kind: Extraction kind that produced the payload
        payload: Kind-specific result fields
        output_file: Artifact written for this result
        output_format: json, markdown or plaintext

    Returns:
        The response body
    """
    fmt = parse_output_format(output_format)
    return render(build_envelope(kind, payload, output_file), fmt)


def render(envelope: dict[str, Any], output_format: str | OutputFormat) -> str:
    """Render an enveloped result in the requested encoding."""
    fmt = parse_output_format(output_format)
    if fmt is OutputFormat.JSON:
        return json.dumps(envelope, indent=2, ensure_ascii=False, default=str)

    kind = ExtractionKind(envelope["extractionType"])
    markdown, plaintext = _RENDERERS[kind]
    return markdown(envelope) if fmt is OutputFormat.MARKDOWN else plaintext(envelope)


# =============================================================================
# Helpers
# =============================================================================


def _summary(title: str, envelope: dict[str, Any], *lines: tuple[str, Any]) -> list[str]:
    out = [f"# {title}", ""]
    out.append(f"**Status:** {envelope['status']}")
    for label, value in lines:
        out.append(f"**{label}:** {value}")
    out.append(f"**Timestamp:** {envelope['timestamp']}")
    out.append("")
    return out


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).replace("|", "\\|").replace("\n", " ")


def _pipe_row(cells: list[Any]) -> str:
    return "| " + " | ".join(_cell(c) for c in cells) + " |"


def _yes_no(flag: Any) -> str:
    return "yes" if flag else "no"


def _demote(markdown: str) -> str:
    """
    Push every heading down one level, for nesting inside another document.

    Lines inside fenced blocks are extracted content and stay as they are.
    """
    lines = []
    fenced = False
    for line in markdown.split("\n"):
        if line.startswith("```"):
            fenced = not fenced
        elif not fenced and line.startswith("#"):
            line = "#" + line
        lines.append(line)
    return "\n".join(lines)


# =============================================================================
# Text
# =============================================================================


def _text_markdown(env: dict[str, Any]) -> str:
    lines = _summary("PDF Text Extraction", env, ("Pages", env["pageCount"]))
    lines.append("## Full Text")
    lines.append("")
    lines.append("```")
    lines.append(env["fullText"])
    lines.append("```")
    return "\n".join(lines) + "\n"


def _text_plaintext(env: dict[str, Any]) -> str:
    return env["fullText"]


# =============================================================================
# Images
# =============================================================================


def _images_markdown(env: dict[str, Any]) -> str:
    lines = _summary(
        "PDF Image Extraction",
        env,
        ("Images Found", env["imageCount"]),
        ("Pages Processed", env["pageCount"]),
    )
    lines.append("## Extracted Images")
    lines.append("")
    for path in env["images"]:
        lines.append(f"- {path}")
    return "\n".join(lines) + "\n"


def _images_plaintext(env: dict[str, Any]) -> str:
    lines = [
        "PDF Image Extraction Results",
        f"Images found: {env['imageCount']}",
        f"Pages processed: {env['pageCount']}",
        "",
        "Image files:",
        *env["images"],
    ]
    return "\n".join(lines) + "\n"


# =============================================================================
# Tables
# =============================================================================


def _tables_markdown(env: dict[str, Any]) -> str:
    lines = _summary("PDF Table Extraction", env, ("Tables Found", env["tableCount"]))

    for i, table in enumerate(env["tables"], 1):
        lines.append(f"## Table {i} (Page {table['page']})")
        lines.append("")

        headers = table.get("headers")
        if headers:
            lines.append(_pipe_row(headers))
            lines.append("|" + " --- |" * len(headers))
            for row in table.get("rows") or []:
                lines.append(_pipe_row(row))
        else:
            # Run reached the end of the page: only the raw lines are known
            lines.append("```")
            lines.extend(table.get("data") or [])
            lines.append("```")
        lines.append("")

    return "\n".join(lines) + "\n"


def _tables_plaintext(env: dict[str, Any]) -> str:
    lines = [
        "PDF Table Extraction Results",
        f"Tables found: {env['tableCount']}",
        f"Output file: {env['outputFile']}",
    ]
    for i, table in enumerate(env["tables"], 1):
        lines.append("")
        lines.append(f"Table {i} (page {table['page']}, {table['rowCount']} rows)")
        lines.extend(table.get("data") or [])
    return "\n".join(lines) + "\n"


# =============================================================================
# Forms
# =============================================================================


def _forms_markdown(env: dict[str, Any]) -> str:
    lines = _summary("PDF Form Field Extraction", env, ("Fields Found", env["fieldCount"]))
    lines.append("## Form Fields")
    lines.append("")

    fields = env["fields"]
    if not fields:
        lines.append("_No form fields found._")
        return "\n".join(lines) + "\n"

    lines.append(_pipe_row(["Field", "Type", "Value", "Read-only", "Required"]))
    lines.append("|" + " --- |" * 5)
    for name, info in fields.items():
        lines.append(
            _pipe_row([
                name,
                info.get("type"),
                info.get("value"),
                _yes_no(info.get("readonly")),
                _yes_no(info.get("required")),
            ])
        )
    return "\n".join(lines) + "\n"


def _forms_plaintext(env: dict[str, Any]) -> str:
    lines = [
        "PDF Form Field Extraction Results",
        f"Fields found: {env['fieldCount']}",
        f"Output file: {env['outputFile']}",
        "",
    ]
    for name, info in env["fields"].items():
        flags = [label for label, key in (("read-only", "readonly"), ("required", "required")) if info.get(key)]
        suffix = f" ({', '.join(flags)})" if flags else ""
        value = info.get("value")
        lines.append(f"{name} [{info.get('type')}] = {'' if value is None else value}{suffix}")
    return "\n".join(lines) + "\n"


# =============================================================================
# Metadata
# =============================================================================


def _metadata_markdown(env: dict[str, Any]) -> str:
    metadata = dict(env["metadata"])
    content = metadata.pop("contentMetadata", None) or {}

    lines = _summary("PDF Metadata Extraction", env, ("Properties", len(metadata)))
    lines.append("## Document Properties")
    lines.append("")
    lines.append(_pipe_row(["Property", "Value"]))
    lines.append("| --- | --- |")
    for key, value in metadata.items():
        lines.append(_pipe_row([key, value]))
    lines.append("")

    lines.append("## Content Metadata")
    lines.append("")
    for key, value in content.items():
        lines.append(f"- **{key}:** {value}")
    return "\n".join(lines) + "\n"


def _metadata_plaintext(env: dict[str, Any]) -> str:
    metadata = dict(env["metadata"])
    content = metadata.pop("contentMetadata", None) or {}

    lines = [
        "PDF Metadata Extraction Results",
        f"Output file: {env['outputFile']}",
        "",
    ]
    lines.extend(f"{key}: {'' if value is None else value}" for key, value in metadata.items())
    if content:
        lines.append("")
        lines.append("Content metadata:")
        lines.extend(f"{key}: {value}" for key, value in content.items())
    return "\n".join(lines) + "\n"


# =============================================================================
# Full
# =============================================================================


def _full_markdown(env: dict[str, Any]) -> str:
    lines = [
        "# PDF Full Extraction",
        "",
        f"**Status:** {env['status']}",
        f"**Source File:** {env['sourceFile']}",
        f"**Extracted:** {env['extractionTimestamp']}",
        f"**Timestamp:** {env['timestamp']}",
        f"**Output File:** {env['outputFile']}",
        "",
    ]
    for kind in _FULL_ORDER:
        section = env.get(kind.value)
        if section is not None:
            markdown, _ = _RENDERERS[kind]
            lines.append(_demote(markdown(section)))
    return "\n".join(lines)


def _full_plaintext(env: dict[str, Any]) -> str:
    lines = [
        "PDF Full Extraction Results",
        f"Source file: {env['sourceFile']}",
        f"Extracted: {env['extractionTimestamp']}",
        f"Output file: {env['outputFile']}",
        "",
    ]
    for kind in _FULL_ORDER:
        section = env.get(kind.value)
        if section is not None:
            _, plaintext = _RENDERERS[kind]
            lines.append(f"----- {kind.value.upper()} -----")
            lines.append(plaintext(section))
    return "\n".join(lines)


_FULL_ORDER: tuple[ExtractionKind, ...] = (
    ExtractionKind.TEXT,
    ExtractionKind.IMAGES,
    ExtractionKind.TABLES,
    ExtractionKind.FORMS,
    ExtractionKind.METADATA,
)

_Renderer = Callable[[dict[str, Any]], str]

_RENDERERS: dict[ExtractionKind, tuple[_Renderer, _Renderer]] = {
    ExtractionKind.TEXT: (_text_markdown, _text_plaintext),
    ExtractionKind.IMAGES: (_images_markdown, _images_plaintext),
    ExtractionKind.TABLES: (_tables_markdown, _tables_plaintext),
    ExtractionKind.FORMS: (_forms_markdown, _forms_plaintext),
    ExtractionKind.METADATA: (_metadata_markdown, _metadata_plaintext),
    ExtractionKind.FULL: (_full_markdown, _full_plaintext),
}
