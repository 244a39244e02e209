"""Pipeline wiring fetch, extraction, reporting and storage together."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from .engine import ClientStats, Extractor, Fetcher, Record
from .infra import RecordStore
from .report import log_records


@dataclass(slots=True)
class PipelineResult:
    """Outcome of one pipeline run."""

    records: list[Record]
    stats: ClientStats
    stored: list[Record] = field(default_factory=list)
    inserted: int = 0


class HolidayPipeline:
    """Fetch the page, extract records, persist them and read them back.

    Fetch and extraction both complete before the store is touched, so a
    fatal fetch error leaves the store unchanged.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        extractor: Extractor,
        store: RecordStore | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.extractor = extractor
        self.store = store
        self.logger = logger or structlog.get_logger("holiday_scraper.pipeline")

    def run(self, url: str) -> PipelineResult:
        self.logger.info("pipeline_started", url=url)
        markup = self.fetcher.fetch(url)
        self.logger.info("client_stats", **self.fetcher.stats.as_dict())
        records = self.extractor.parse(markup)
        log_records(self.logger, records, origin="parse")

        result = PipelineResult(records=records, stats=self.fetcher.stats)
        if self.store is None:
            return result
        self.store.init_schema()
        result.inserted = self.store.insert_many(records)
        result.stored = self.store.list_all()
        log_records(self.logger, result.stored, origin="database")
        self.logger.info(
            "pipeline_finished", extracted=len(records), inserted=result.inserted
        )
        return result


__all__ = ["HolidayPipeline", "PipelineResult"]
