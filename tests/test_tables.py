"""
Tests for tab-delimited table detection.
"""

from __future__ import annotations

from pdfextract.tables import TABLE_LINE, detect_tables, split_fields


def test_table_line_needs_two_tabs() -> None:
    assert TABLE_LINE.fullmatch("a\tb\tc")
    assert TABLE_LINE.fullmatch("\t\t")
    assert not TABLE_LINE.fullmatch("a\tb")
    assert not TABLE_LINE.fullmatch("plain text")


def test_split_fields_drops_trailing_empties() -> None:
    assert split_fields("a\tb\t\t") == ["a", "b"]
    assert split_fields("\ta\tb") == ["", "a", "b"]


def test_closed_run_has_headers_and_rows() -> None:
    """Test a run ended by ordinary text is split into headers and rows."""
    text = "Staff list\nName\tAge\tCity\nAlice\t30\tParis\nBob\t25\tRome\nTotal: 2\n"
    tables = detect_tables(text, 4)

    assert len(tables) == 1
    table = tables[0].to_dict()
    assert table["page"] == 4
    assert table["rowCount"] == 3
    assert table["data"] == ["Name\tAge\tCity", "Alice\t30\tParis", "Bob\t25\tRome"]
    assert table["headers"] == ["Name", "Age", "City"]
    assert table["rows"] == [["Alice", "30", "Paris"], ["Bob", "25", "Rome"]]


def test_open_run_has_only_raw_lines() -> None:
    """Test a run still open at the end of the page carries no headers or rows."""
    tables = detect_tables("Intro\nA\tB\tC\n1\t2\t3", 1)

    assert len(tables) == 1
    table = tables[0].to_dict()
    assert table == {"page": 1, "rowCount": 2, "data": ["A\tB\tC", "1\t2\t3"]}
    assert "headers" not in table
    assert "rows" not in table


def test_trailing_newline_does_not_close_run() -> None:
    tables = detect_tables("A\tB\tC\n1\t2\t3\n", 1)
    assert tables[0].headers is None


def test_blank_lines_inside_run_are_skipped() -> None:
    tables = detect_tables("A\tB\tC\n\n1\t2\t3\nDone", 1)
    assert len(tables) == 1
    assert tables[0].row_count == 2
    assert tables[0].rows == [["1", "2", "3"]]


def test_multiple_runs_on_one_page() -> None:
    text = "a\tb\tc\nbreak\nd\te\tf\ng\th\ti\nend"
    tables = detect_tables(text, 2)
    assert [t.row_count for t in tables] == [1, 2]
    assert tables[0].rows == []


def test_page_without_tables() -> None:
    assert detect_tables("Just prose.\nMore prose.", 1) == []


def test_run_closed_by_plain_line_on_page_two() -> None:
    tables = detect_tables("a\tb\tc\nx\ty\tz\nplain line\n", 2)
    assert [t.to_dict() for t in tables] == [
        {
            "page": 2,
            "rowCount": 2,
            "data": ["a\tb\tc", "x\ty\tz"],
            "headers": ["a", "b", "c"],
            "rows": [["x", "y", "z"]],
        }
    ]


def test_single_line_run_at_end_of_text() -> None:
    table = detect_tables("a\tb\tc\n", 1)[0].to_dict()
    assert table["rowCount"] == 1
    assert "headers" not in table
    assert "rows" not in table
