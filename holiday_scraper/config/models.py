"""Pydantic models describing the scraper configuration."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_TARGET_URL = (
    "https://www.commerce.wa.gov.au/labour-relations/public-holidays-western-australia"
)
DEFAULT_USER_AGENT = "holiday-scraper/1.0"
MEMORY_DATABASE = ":memory:"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class FetcherConfig(BaseModel):
    """HTTP client settings and retry budget for the fetcher."""

    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 2.0
    user_agent: str = DEFAULT_USER_AGENT
    extra_headers: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_budget(self) -> "FetcherConfig":
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")
        if not self.user_agent.strip():
            raise ValueError("user_agent cannot be empty")
        return self

    def default_headers(self) -> dict[str, str]:
        """Static header set sent with every request; always carries the UA."""

        headers = dict(self.extra_headers)
        headers["User-Agent"] = self.user_agent
        return headers


class TableLayout(BaseModel):
    """CSS queries locating the holiday grid inside the page."""

    year_cells: str = "thead th"
    rows: str = "tbody tr"
    name: str = "th strong"
    cells: str = "td"

    @field_validator("year_cells", "rows", "name", "cells")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("selector cannot be empty")
        return value


class StorageConfig(BaseModel):
    """Where extracted records are persisted."""

    database: str = "holidays.db"
    table: str = "holidays"

    @field_validator("database", mode="before")
    @classmethod
    def _coerce_database(cls, value: Any) -> str:
        return str(value)

    @field_validator("table")
    @classmethod
    def _validate_table(cls, value: str) -> str:
        if not _IDENTIFIER.match(value):
            raise ValueError(f"table must be a plain SQL identifier: {value!r}")
        return value

    def resolved_database(self, base_dir: Path) -> str:
        """Return the database location relative to the project data directory."""

        if self.database == MEMORY_DATABASE:
            return self.database
        path = Path(self.database).expanduser()
        if not path.is_absolute():
            path = (base_dir / path).resolve()
        return str(path)


class AppConfig(BaseModel):
    """Top-level configuration for one scraping run."""

    target_url: str = DEFAULT_TARGET_URL
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    layout: TableLayout = Field(default_factory=TableLayout)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @field_validator("target_url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("target_url must be an http(s) URL")
        return value


__all__ = [
    "AppConfig",
    "DEFAULT_TARGET_URL",
    "DEFAULT_USER_AGENT",
    "FetcherConfig",
    "MEMORY_DATABASE",
    "StorageConfig",
    "TableLayout",
]
