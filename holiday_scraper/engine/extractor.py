"""Turn the holiday table markup into one record per (holiday, year)."""

from __future__ import annotations

import re
from dataclasses import dataclass

import structlog

from ..config import TableLayout
from .markup import MarkupBackend, MarkupNode, SelectolaxBackend

_WHITESPACE = re.compile(r"\s+")

# Literal substitutions applied to serialized markup, in order; the parser may
# hand back a decoded no-break space instead of the entity
_MARKUP_SUBSTITUTIONS = (
    ("<br>", " "),
    ("&amp;", "&"),
    ("&nbsp;", " "),
    ("\u00a0", " "),
)


@dataclass(slots=True, frozen=True)
class Record:
    """One holiday date for one year column."""

    year: str
    entity_name: str
    date_text: str


def normalize_markup(markup: str) -> str:
    """Replace line breaks and decode the ``&amp;``/``&nbsp;`` entities, then trim."""

    for needle, replacement in _MARKUP_SUBSTITUTIONS:
        markup = markup.replace(needle, replacement)
    return markup.strip()


def normalize_cell(markup: str) -> str:
    """Markup pass followed by collapsing whitespace runs into one space."""

    return _WHITESPACE.sub(" ", normalize_markup(markup)).strip()


class Extractor:
    """Parse the thead/tbody holiday grid into :class:`Record` objects.

    Rows without a name element are dropped and rows are paired with the year
    header in lockstep, so malformed markup shrinks the output instead of
    raising.
    """

    def __init__(
        self,
        layout: TableLayout | None = None,
        backend: MarkupBackend | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.layout = layout or TableLayout()
        self.backend = backend or SelectolaxBackend()
        self.logger = logger or structlog.get_logger("holiday_scraper.extractor")
        self._year_query = self.backend.compile(self.layout.year_cells)
        self._row_query = self.backend.compile(self.layout.rows)
        self._name_query = self.backend.compile(self.layout.name)
        self._cell_query = self.backend.compile(self.layout.cells)

    def parse(self, markup: str) -> list[Record]:
        if not markup.strip():
            self.logger.info("records_extracted", count=0, years=0)
            return []
        document = self.backend.parse(markup)
        years = self.year_labels(document)

        records: list[Record] = []
        for index, row in enumerate(document.select(self._row_query)):
            records.extend(self._parse_row(row, index, years))
        self.logger.info("records_extracted", count=len(records), years=len(years))
        return records

    def year_labels(self, document: MarkupNode) -> list[str]:
        # First header cell labels the name column
        cells = document.select(self._year_query)[1:]
        return [cell.inner_text().strip() for cell in cells]

    def _parse_row(self, row: MarkupNode, index: int, years: list[str]) -> list[Record]:
        names = row.select(self._name_query)
        if not names:
            self.logger.debug("row_skipped", row=index, reason="missing_name")
            return []
        holiday = normalize_markup(names[0].inner_markup())
        cells = row.select(self._cell_query)
        if len(cells) != len(years):
            self.logger.debug(
                "lockstep_length_mismatch",
                row=index,
                holiday=holiday,
                cells=len(cells),
                years=len(years),
            )
        return [
            Record(year=year, entity_name=holiday, date_text=normalize_cell(cell.inner_markup()))
            for cell, year in zip(cells, years)
        ]


__all__ = ["Extractor", "Record", "normalize_cell", "normalize_markup"]
