"""Human-readable rendering of extracted records and client statistics."""

from __future__ import annotations

from typing import Sequence

import structlog
from rich import box
from rich.table import Table

from .engine import ClientStats, Record


def render_records(records: Sequence[Record], title: str = "Holidays") -> Table:
    table = Table(title=f"{title} · {len(records)} rows", box=box.SIMPLE_HEAD)
    table.add_column("Year", style="cyan", no_wrap=True)
    table.add_column("Holiday", style="green")
    table.add_column("Date")
    for record in records:
        table.add_row(record.year, record.entity_name, record.date_text)
    return table


def render_stats(stats: ClientStats) -> Table:
    table = Table(title="Client statistics", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Total requests", str(stats.total_requests))
    table.add_row("Successful", str(stats.successful_requests))
    table.add_row("Failed", str(stats.failed_requests))
    return table


def log_records(
    logger: structlog.BoundLogger, records: Sequence[Record], origin: str = "parse"
) -> None:
    """Emit one log event per record, or a warning when there are none."""

    if not records:
        logger.warning("no_records", origin=origin)
        return
    for record in records:
        logger.info(
            "holiday",
            origin=origin,
            year=record.year,
            holiday=record.entity_name,
            date=record.date_text,
        )


__all__ = ["log_records", "render_records", "render_stats"]
