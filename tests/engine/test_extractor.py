from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from holiday_scraper.config import TableLayout
from holiday_scraper.engine import Extractor, Record, normalize_cell, normalize_markup
from holiday_scraper.errors import SelectorCompilationError


def _table(header: str, body: str) -> str:
    return f"<table><thead>{header}</thead><tbody>{body}</tbody></table>"


def test_parse_pairs_rows_with_year_columns(holiday_html) -> None:
    records = Extractor().parse(holiday_html)
    assert records == [
        Record("2023", "New Year's Day", "January 1"),
        Record("2024", "New Year's Day", "January 1"),
        Record("2023", "Christmas Day", "December 25"),
        Record("2024", "Christmas Day", "December 25"),
    ]


def test_parse_header_with_blank_name_column() -> None:
    html = _table(
        "<tr><th></th><th>2023</th><th>2024</th></tr>",
        "<tr><th><strong>New Year's Day</strong></th><td>January 1</td><td>January 1</td></tr>",
    )
    assert Extractor().parse(html) == [
        Record("2023", "New Year's Day", "January 1"),
        Record("2024", "New Year's Day", "January 1"),
    ]


def test_parse_decodes_entities_and_breaks() -> None:
    html = _table(
        "<tr><th>Holiday</th><th>2023</th></tr>",
        """
        <tr><th><strong>Labor &amp; Workers' Day</strong></th><td>May 1&nbsp;&nbsp;</td></tr>
        <tr><th><strong>Independence<br>Day</strong></th><td>July 4</td></tr>
        """,
    )
    assert Extractor().parse(html) == [
        Record("2023", "Labor & Workers' Day", "May 1"),
        Record("2023", "Independence Day", "July 4"),
    ]


def test_parse_collapses_whitespace_in_cells() -> None:
    html = _table(
        "<tr><th>Holiday</th><th>2025</th></tr>",
        "<tr><th><strong>King's Birthday</strong></th>"
        "<td>\n   Monday<br>29&nbsp;September\t  </td></tr>",
    )
    assert Extractor().parse(html) == [Record("2025", "King's Birthday", "Monday 29 September")]


def test_parse_keeps_empty_cells() -> None:
    html = _table(
        "<tr><th>Holiday</th><th>2023</th></tr>",
        "<tr><th><strong>Holiday with No Date</strong></th><td></td></tr>",
    )
    assert Extractor().parse(html) == [Record("2023", "Holiday with No Date", "")]


@pytest.mark.parametrize("markup", ["", "   \n\t  "])
def test_parse_blank_markup_yields_nothing(markup: str) -> None:
    assert Extractor().parse(markup) == []


def test_parse_header_without_year_columns() -> None:
    html = _table(
        "<tr><th></th></tr>",
        "<tr><th><strong>Australia Day</strong></th><td>January 26</td></tr>",
    )
    assert Extractor().parse(html) == []


def test_parse_skips_rows_without_name_element() -> None:
    html = _table(
        "<tr><th>Holiday</th><th>2023</th><th>2024</th></tr>",
        """
        <tr><th>Plain heading</th><td>March 6</td><td>March 4</td></tr>
        <tr><th><strong>Anzac Day</strong></th><td>April 25</td><td>April 25</td></tr>
        <tr><td>stray</td><td>cells</td></tr>
        """,
    )
    assert Extractor().parse(html) == [
        Record("2023", "Anzac Day", "April 25"),
        Record("2024", "Anzac Day", "April 25"),
    ]


@pytest.mark.parametrize(
    ("cells", "expected"),
    [
        ("<td>June 5</td>", [("2023", "June 5")]),
        ("<td>June 5</td><td>June 3</td>", [("2023", "June 5"), ("2024", "June 3")]),
        (
            "<td>June 5</td><td>June 3</td><td>June 2</td><td>June 1</td>",
            [("2023", "June 5"), ("2024", "June 3"), ("2025", "June 2")],
        ),
    ],
)
def test_parse_stops_at_shorter_sequence(cells: str, expected: list[tuple[str, str]]) -> None:
    html = _table(
        "<tr><th>Holiday</th><th>2023</th><th>2024</th><th>2025</th></tr>",
        f"<tr><th><strong>Western Australia Day</strong></th>{cells}</tr>",
    )
    records = Extractor().parse(html)
    assert [(record.year, record.date_text) for record in records] == expected
    assert {record.entity_name for record in records} == {"Western Australia Day"}


def test_parse_preserves_duplicates_in_document_order() -> None:
    row = "<tr><th><strong>Easter Monday</strong></th><td>April 10</td></tr>"
    html = _table("<tr><th>Holiday</th><th>2023</th></tr>", row + row)
    assert Extractor().parse(html) == [
        Record("2023", "Easter Monday", "April 10"),
        Record("2023", "Easter Monday", "April 10"),
    ]


def test_parse_logs_lockstep_mismatch() -> None:
    html = _table(
        "<tr><th>Holiday</th><th>2023</th><th>2024</th></tr>",
        "<tr><th><strong>Good Friday</strong></th><td>April 7</td></tr>",
    )
    with capture_logs() as logs:
        records = Extractor().parse(html)
    assert len(records) == 1
    mismatch = [entry for entry in logs if entry["event"] == "lockstep_length_mismatch"]
    assert mismatch and mismatch[0]["cells"] == 1 and mismatch[0]["years"] == 2


def test_parse_with_custom_layout() -> None:
    html = """
    <table class="dates">
      <tr class="head"><td>Name</td><td>2026</td></tr>
      <tr class="row"><td><b>Boxing Day</b></td><td class="when">December 26</td></tr>
    </table>
    """
    layout = TableLayout(year_cells="tr.head td", rows="tr.row", name="b", cells="td.when")
    assert Extractor(layout).parse(html) == [Record("2026", "Boxing Day", "December 26")]


def test_invalid_selector_fails_at_construction() -> None:
    class RejectingBackend:
        def compile(self, query: str) -> str:
            if query == "tbody tr[":
                raise SelectorCompilationError(query, "unterminated attribute")
            return query

        def parse(self, text: str):  # pragma: no cover - never reached
            raise AssertionError("parse must not run")

    with pytest.raises(SelectorCompilationError) as excinfo:
        Extractor(TableLayout(rows="tbody tr["), backend=RejectingBackend())
    assert excinfo.value.query == "tbody tr["


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("<br>", ""),
        ("A<br>B", "A B"),
        ("Fish &amp; Chips", "Fish & Chips"),
        ("&nbsp;x&nbsp;", "x"),
        ("  padded  ", "padded"),
    ],
)
def test_normalize_markup_substitution_table(raw: str, expected: str) -> None:
    assert normalize_markup(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "Labor &amp; Workers' Day",
        "May 1&nbsp;&nbsp;",
        "\n  Monday<br>29\tSeptember ",
        "",
        "December 25",
    ],
)
def test_normalization_is_idempotent(raw: str) -> None:
    once = normalize_cell(raw)
    assert normalize_cell(once) == once
    assert normalize_markup(normalize_markup(raw)) == normalize_markup(raw)


def test_normalize_cell_collapses_decoded_spaces() -> None:
    assert normalize_cell("May&nbsp; &nbsp;1") == "May 1"
