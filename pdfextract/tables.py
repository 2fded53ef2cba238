"""
Tab-delimited table detection.

This is a text heuristic, not layout analysis: any line with at least two
tab characters is a table line, and each maximal run of table lines on a
page becomes one candidate table.

A run closed by a non-blank, non-table line is split into ``headers``
(first line) and ``rows`` (remaining lines). A run still open when the page
text ends carries only ``rowCount`` and the raw ``data`` lines.
"""

from __future__ import annotations

import re
from enum import Enum

from .extract.base import Table

TABLE_LINE = re.compile(r".*\t.*\t.*")


class RunState(str, Enum):
    """Scanner state."""

    IDLE = "idle"
    IN_RUN = "in_run"


def split_fields(line: str) -> list[str]:
    """Split a table line on tabs, dropping trailing empty fields."""
    fields = line.split("\t")
    while fields and fields[-1] == "":
        fields.pop()
    return fields


def _closed_table(lines: list[str], page_number: int) -> Table:
    return Table(
        page=page_number,
        row_count=len(lines),
        data=list(lines),
        headers=split_fields(lines[0]),
        rows=[split_fields(line) for line in lines[1:]],
    )


def _open_table(lines: list[str], page_number: int) -> Table:
    return Table(page=page_number, row_count=len(lines), data=list(lines))


def detect_tables(page_text: str, page_number: int) -> list[Table]:
    """
    Scan one page's text for runs of tab-delimited lines.

    Args:
        page_text: Extracted text of a single page
        page_number: 1-based page number recorded on each table

    Returns:
        Tables in the order their runs appear on the page
    """
    tables: list[Table] = []
    run: list[str] = []
    state = RunState.IDLE

    for line in page_text.split("\n"):
        if TABLE_LINE.fullmatch(line):
            run.append(line)
            state = RunState.IN_RUN
        elif state is RunState.IN_RUN and line.strip():
            tables.append(_closed_table(run, page_number))
            run = []
            state = RunState.IDLE

    # End of text while still inside a run
    if state is RunState.IN_RUN:
        tables.append(_open_table(run, page_number))

    return tables
