"""Typer CLI entrypoint for Holiday-Scraper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog
import typer
import yaml
from rich.console import Console

from .config import AppConfig, ConfigRepository
from .engine import Extractor, Fetcher
from .errors import ScraperError
from .infra import SQLiteRecordStore
from .logging_conf import configure_logging, log_paths, tail_log
from .pipeline import HolidayPipeline
from .report import render_records, render_stats

app = typer.Typer(
    help="Holiday-Scraper command line tool",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Inspect or reset the configuration file",
    no_args_is_help=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Inspect log files",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    config: AppConfig
    logger: structlog.BoundLogger


def build_state(verbose: bool) -> AppState:
    repository = ConfigRepository()
    logger = configure_logging(verbose=verbose, log_dir=repository.locator.logs_dir)
    config = repository.load()
    return AppState(repository=repository, config=config, logger=logger)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _fail(exc: ScraperError) -> None:
    console.print(f"Error: {exc}", style="red")
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    try:
        ctx.obj = build_state(verbose)
    except ScraperError as exc:
        _fail(exc)


@app.command("run", help="Fetch the holiday page, extract records and store them.")
def run(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", help="Override the configured page URL."),
    database: Optional[str] = typer.Option(
        None, "--database", help="SQLite file to write to (':memory:' for a throwaway store)."
    ),
    no_save: bool = typer.Option(False, "--no-save", help="Skip the database step."),
    quiet: bool = typer.Option(False, "--quiet", help="Only print a one-line summary."),
) -> None:
    state = _get_state(ctx)
    config = state.config
    target = url or config.target_url
    location = database or state.repository.database_location(config)

    try:
        with Fetcher(config.fetcher, logger=state.logger.bind(component="fetcher")) as fetcher:
            extractor = Extractor(config.layout, logger=state.logger.bind(component="extractor"))
            store = None if no_save else SQLiteRecordStore(location, config.storage.table)
            try:
                pipeline = HolidayPipeline(
                    fetcher, extractor, store, logger=state.logger.bind(component="pipeline")
                )
                result = pipeline.run(target)
            finally:
                if store is not None:
                    store.close()
    except ScraperError as exc:
        _fail(exc)

    if quiet:
        message = f"Extracted {len(result.records)} records"
        if store is not None:
            message += f", stored {result.inserted}"
        console.print(message)
        return
    console.print(render_records(result.records, title="Holidays from page"))
    if store is not None:
        console.print(render_records(result.stored, title="Holidays in database"))
        console.print(f"Stored {result.inserted} records in {location}", style="green")
    console.print(render_stats(result.stats))


@app.command("list", help="Show the records currently stored in the database.")
def list_records(
    ctx: typer.Context,
    database: Optional[str] = typer.Option(None, "--database", help="SQLite file to read."),
) -> None:
    state = _get_state(ctx)
    location = database or state.repository.database_location(state.config)
    try:
        with SQLiteRecordStore(location, state.config.storage.table) as store:
            store.init_schema()
            records = store.list_all()
    except ScraperError as exc:
        _fail(exc)
    if not records:
        console.print("No holidays stored yet, run `holiday-scraper run` first.", style="yellow")
        return
    console.print(render_records(records, title="Holidays in database"))


@config_app.command("show", help="Print the active configuration.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    console.print(f"# {state.repository.locator.config_path()}", style="dim")
    console.print(
        yaml.safe_dump(state.config.model_dump(mode="json"), allow_unicode=True, sort_keys=False),
        markup=False,
    )


@config_app.command("init", help="Write the default configuration file.")
def config_init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    state = _get_state(ctx)
    path = state.repository.locator.config_path()
    if path.exists() and not force:
        # build_state already wrote defaults when the file was missing
        console.print(f"Configuration already exists at {path}", style="yellow")
        return
    state.repository.save(AppConfig())
    console.print(f"Configuration written to {path}", style="green")


@log_app.command("show", help="Show the most recent log lines.")
def log_show(
    ctx: typer.Context,
    tail: int = typer.Option(100, "--tail", help="Number of lines to show."),
    errors: bool = typer.Option(False, "--errors", help="Show the error log instead."),
) -> None:
    state = _get_state(ctx)
    paths = log_paths(state.repository.locator.logs_dir)
    path = paths["error"] if errors else paths["app"]
    lines = tail_log(path, tail)
    if not lines:
        console.print("No log entries yet.", style="dim")
        return
    console.print(f"{path.name} · last {len(lines)} lines", style="cyan")
    console.print("".join(lines), markup=False, highlight=False)


app.add_typer(config_app)
app.add_typer(log_app)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
