"""Exception hierarchy shared by fetch, extraction and storage layers."""

from __future__ import annotations


class ScraperError(Exception):
    """Base class for every fatal error raised by Holiday-Scraper."""


class FetchExhausted(ScraperError):
    """All fetch attempts against a URL failed."""

    def __init__(self, url: str, attempts: int, elapsed: float) -> None:
        self.url = url
        self.attempts = attempts
        self.elapsed = elapsed
        super().__init__(
            f"Failed to fetch {url} after {attempts} attempts in {elapsed:.2f}s"
        )


class SelectorCompilationError(ScraperError):
    """A structural query used to navigate parsed markup is malformed."""

    def __init__(self, query: str, reason: str = "") -> None:
        self.query = query
        message = f"Invalid selector {query!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class StorageError(ScraperError):
    """Record store could not connect, create its schema, insert or read."""


class ConfigError(ScraperError):
    """Configuration file is unreadable or fails validation."""


__all__ = [
    "ConfigError",
    "FetchExhausted",
    "ScraperError",
    "SelectorCompilationError",
    "StorageError",
]
