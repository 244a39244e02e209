"""Shared fixtures for Holiday-Scraper tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from holiday_scraper.config import ConfigLocator, ConfigRepository, FetcherConfig
from holiday_scraper.engine import fetcher as fetcher_module

HOLIDAY_TABLE = """
<html><body>
<table>
    <thead>
        <tr><th>Holiday</th><th>2023</th><th>2024</th></tr>
    </thead>
    <tbody>
        <tr>
            <th><strong>New Year's Day</strong></th>
            <td>January 1</td><td>January 1</td>
        </tr>
        <tr>
            <th><strong>Christmas Day</strong></th>
            <td>December 25</td><td>December 25</td>
        </tr>
    </tbody>
</table>
</body></html>
"""


@pytest.fixture
def holiday_html() -> str:
    return HOLIDAY_TABLE


@pytest.fixture
def fetcher_config() -> Callable[..., FetcherConfig]:
    def _builder(**overrides: Any) -> FetcherConfig:
        base: dict[str, Any] = {"timeout": 5.0, "max_retries": 3, "retry_delay": 0.25}
        base.update(overrides)
        return FetcherConfig(**base)

    return _builder


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record retry pauses instead of sleeping."""

    recorded: list[float] = []
    monkeypatch.setattr(fetcher_module.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    def _builder(status: int = 200, text: str = "", url: str = "https://example.com/") -> httpx.Response:
        return httpx.Response(status, request=httpx.Request("GET", url), text=text)

    return _builder


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigRepository:
    monkeypatch.setenv("HOLIDAY_SCRAPER_HOME", str(tmp_path))
    return ConfigRepository(ConfigLocator(project_root=tmp_path))
