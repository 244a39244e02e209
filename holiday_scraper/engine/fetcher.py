"""HTTP fetching with bounded retry and per-instance usage accounting."""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from threading import Lock

import httpx
import structlog

from ..config import FetcherConfig
from ..errors import FetchExhausted


@dataclass(slots=True, frozen=True)
class ClientStats:
    """Counters updated once per ``Fetcher.fetch`` call."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
        }


class Fetcher:
    """Fetch a page as text, retrying failed attempts with a fixed delay.

    A call makes at most ``max_retries + 1`` attempts. Timeouts, transport
    errors, unparseable URLs and non-2xx statuses only fail the attempt; the
    call itself fails with :class:`FetchExhausted` once the attempt budget is
    spent.
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config or FetcherConfig()
        self.logger = logger or structlog.get_logger("holiday_scraper.fetcher")
        self._client = httpx.Client(
            headers=self.config.default_headers(),
            timeout=self.config.timeout,
            follow_redirects=True,
        )
        self._stats = ClientStats()
        self._stats_lock = Lock()
        self._request_id = 0

    @property
    def max_retries(self) -> int:
        return self.config.max_retries

    @property
    def retry_delay(self) -> float:
        return self.config.retry_delay

    @property
    def stats(self) -> ClientStats:
        """Snapshot of the usage counters."""

        with self._stats_lock:
            return self._stats

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def fetch(self, url: str) -> str:
        with self._stats_lock:
            self._request_id += 1
            request_id = self._request_id
        log = self.logger.bind(url=url, request_id=request_id)
        log.info("fetch_started", max_attempts=self.max_retries + 1)

        started = time.monotonic()
        attempt = 0
        last_error: Exception | None = None
        while attempt <= self.max_retries:
            attempt += 1
            try:
                response = self._client.get(url)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                log.warning("fetch_attempt_failed", attempt=attempt, error=str(exc))
                last_error = exc
            else:
                if response.is_success:
                    body = self._decode(response)
                    self._record(success=True)
                    log.info(
                        "fetch_succeeded",
                        attempt=attempt,
                        status=response.status_code,
                        elapsed=round(time.monotonic() - started, 3),
                    )
                    return body
                log.warning(
                    "fetch_attempt_failed",
                    attempt=attempt,
                    status=response.status_code,
                )
                last_error = RuntimeError(f"Unexpected status {response.status_code}")

            if attempt <= self.max_retries:
                log.info("fetch_retry_scheduled", attempt=attempt, delay=self.retry_delay)
                time.sleep(self.retry_delay)

        self._record(success=False)
        elapsed = time.monotonic() - started
        log.error("fetch_exhausted", attempts=attempt, elapsed=round(elapsed, 3))
        raise FetchExhausted(url, attempt, elapsed) from last_error

    # ------------------------------------------------------------------
    def _record(self, success: bool) -> None:
        with self._stats_lock:
            stats = self._stats
            if success:
                self._stats = replace(
                    stats,
                    total_requests=stats.total_requests + 1,
                    successful_requests=stats.successful_requests + 1,
                )
            else:
                self._stats = replace(
                    stats,
                    total_requests=stats.total_requests + 1,
                    failed_requests=stats.failed_requests + 1,
                )

    @staticmethod
    def _decode(response: httpx.Response) -> str:
        # The page is treated as UTF-8 whatever charset the server declares
        return response.content.decode("utf-8", errors="replace")


__all__ = ["ClientStats", "Fetcher"]
