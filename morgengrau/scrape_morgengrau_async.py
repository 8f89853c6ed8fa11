#!/usr/bin/env python3
"""
Async morgengrau.net event scraper.

Requests the site's day search once per calendar day from 2004 through the
current year, extracts one event per day with results, and writes them all
to a JSON file when the crawl is done.

Uses aiohttp with a fixed pool of workers (16 by default) sharing one
session. Any failed request aborts the whole run; nothing is retried.

Usage:
    python -m morgengrau.scrape_morgengrau_async
    python -m morgengrau.scrape_morgengrau_async --start-date 2024-02-01 --end-date 2024-02-29 -o feb.json
"""

import argparse
import asyncio
import os
import ssl
import sys
import time
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional, TextIO

import aiohttp
import certifi
import structlog

from morgengrau.pipeline.accumulator import EventAccumulator, prepare_output, write_events
from morgengrau.pipeline.config import (
    CONCURRENT_REQUESTS,
    DEFAULT_OUTPUT,
    LOG_FORMAT,
    MAX_QUEUE_SIZE,
    ORIGIN_YEAR,
    REQUEST_TIMEOUT_SECONDS,
    SEARCH_URL,
    USER_AGENT,
)
from morgengrau.pipeline.dates import crawl_range, iter_search_urls
from morgengrau.pipeline.errors import (
    ConfigurationError,
    ErrorPolicy,
    FetchError,
    MalformedEventError,
    MorgengrauError,
)
from morgengrau.pipeline.extract_events import Event, parse_event_page
from morgengrau.pipeline.log import configure_logging

# Fix SSL on macOS - certifi provides Mozilla's CA bundle
os.environ['SSL_CERT_FILE'] = certifi.where()

logger = structlog.get_logger(__name__)


@dataclass
class CrawlStats:
    """Counters for one crawl run."""

    requests: int = 0
    responses: int = 0
    events: int = 0
    empty_days: int = 0
    skipped: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def elapsed(self) -> float:
        return time.time() - self.start_time


class AsyncMorgengrauScraper:
    """
    Crawls the morgengrau day search with a bounded worker pool.

    Every day in [start_date, end_date] becomes one queued URL. Workers pull
    URLs until the queue is drained; the first fetch error cancels the rest.
    """

    def __init__(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        output: Path = DEFAULT_OUTPUT,
        base_url: str = SEARCH_URL,
        concurrent_requests: int = CONCURRENT_REQUESTS,
        request_timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_queue_size: int = MAX_QUEUE_SIZE,
        on_malformed: ErrorPolicy = ErrorPolicy.ABORT,
        stream: Optional[TextIO] = None,
    ):
        default_start, default_end = crawl_range(ORIGIN_YEAR)
        self.start_date = start_date or default_start
        self.end_date = end_date or default_end
        self.output = Path(output)
        self.base_url = base_url
        self.concurrent_requests = concurrent_requests
        self.request_timeout = request_timeout
        self.max_queue_size = max_queue_size
        self.on_malformed = ErrorPolicy(on_malformed)
        self.stream = stream

        if self.concurrent_requests < 1:
            raise ConfigurationError("concurrent_requests must be at least 1")
        if self.start_date > self.end_date:
            raise ConfigurationError(
                f"start date {self.start_date} is after end date {self.end_date}"
            )

        self.accumulator = EventAccumulator()
        self.events: list[Event] = []
        self.stats = CrawlStats()

    def _build_queue(self) -> asyncio.Queue:
        """Load every day URL into a bounded queue."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue_size)
        for url in iter_search_urls(self.start_date, self.end_date, self.base_url):
            try:
                queue.put_nowait(url)
            except asyncio.QueueFull:
                raise ConfigurationError(
                    f"Crawl range {self.start_date}..{self.end_date} exceeds "
                    f"queue capacity of {self.max_queue_size} URLs"
                ) from None
        return queue

    async def _fetch_url(self, session: aiohttp.ClientSession, url: str) -> tuple[bytes, Optional[str]]:
        """Fetch a single URL as raw bytes plus the declared charset, if any.

        Decoding is left to the extractor; pages may be Latin-1 without saying so.
        Any failure raises FetchError.
        """
        logger.info("visiting", url=url)
        self.stats.requests += 1
        try:
            async with session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=self.request_timeout)
            ) as response:
                if response.status != 200:
                    raise FetchError(url, f"HTTP {response.status}")
                body = await response.read()
                charset = response.charset
        except asyncio.TimeoutError:
            raise FetchError(url, f"timed out after {self.request_timeout}s") from None
        except aiohttp.ClientError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e

        self.stats.responses += 1
        logger.info("response", url=url)
        return body, charset

    def _extract(self, url: str, body: bytes, charset: Optional[str] = None) -> Optional[Event]:
        """Run the page extractor, applying the malformed-page policy."""
        try:
            event = parse_event_page(body, encoding=charset)
        except MalformedEventError as e:
            if self.on_malformed is ErrorPolicy.ABORT:
                raise
            self.stats.skipped += 1
            logger.warning("malformed_event_skipped", url=url, error=str(e))
            return None

        if event is None:
            self.stats.empty_days += 1
        return event

    async def _worker(self, session: aiohttp.ClientSession, queue: asyncio.Queue) -> None:
        while True:
            try:
                url = queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            body, charset = await self._fetch_url(session, url)
            event = self._extract(url, body, charset)
            if event is not None:
                await self.accumulator.append(event)
                self.stats.events += 1
            queue.task_done()

    async def _crawl(self, queue: asyncio.Queue) -> None:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "de-DE,de;q=0.9,en;q=0.5",
        }

        # Create SSL context with certifi certificates (fixes macOS SSL issues)
        ssl_context = ssl.create_default_context(cafile=certifi.where())

        # Connector limit is the global parallelism cap
        connector = aiohttp.TCPConnector(ssl=ssl_context, limit=self.concurrent_requests)

        async with aiohttp.ClientSession(headers=headers, connector=connector) as session:
            workers = [
                asyncio.create_task(self._worker(session, queue))
                for _ in range(self.concurrent_requests)
            ]
            try:
                await asyncio.gather(*workers)
            except BaseException:
                for worker in workers:
                    worker.cancel()
                await asyncio.gather(*workers, return_exceptions=True)
                raise

    async def run_async(self) -> list[Event]:
        """Execute the crawl and write the output file."""
        queue = self._build_queue()
        prepare_output(self.output)

        logger.info(
            "crawl_started",
            start_date=self.start_date.isoformat(),
            end_date=self.end_date.isoformat(),
            urls=queue.qsize(),
            concurrent_requests=self.concurrent_requests,
        )
        self.stats = CrawlStats()

        await self._crawl(queue)

        self.events = await self.accumulator.snapshot()
        write_events(self.events, self.output, self.stream)

        logger.info(
            "stats",
            elapsed=f"{self.stats.elapsed:.1f}s",
            requests=self.stats.requests,
            responses=self.stats.responses,
            events=self.stats.events,
            empty_days=self.stats.empty_days,
            skipped=self.stats.skipped,
        )
        logger.info("scraping_complete", output=str(self.output))
        return self.events

    def run(self) -> list[Event]:
        """Synchronous entry point - runs the async pipeline."""
        return asyncio.run(self.run_async())


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: {value} (use ISO format: YYYY-MM-DD)"
        ) from None


def main():
    parser = argparse.ArgumentParser(
        description="Scrape every day of the morgengrau.net event search into a JSON file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m morgengrau.scrape_morgengrau_async
  python -m morgengrau.scrape_morgengrau_async --start-date 2024-01-01 --end-date 2024-01-31 --no-stdout
        """
    )

    parser.add_argument(
        "--start-date",
        type=_parse_date,
        help=f"First day to crawl (default: {ORIGIN_YEAR}-01-01)"
    )

    parser.add_argument(
        "--end-date",
        type=_parse_date,
        help="Last day to crawl (default: Dec 31 of the current year)"
    )

    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"Output JSON file path (default: {DEFAULT_OUTPUT})"
    )

    parser.add_argument(
        "--concurrent",
        type=int,
        default=CONCURRENT_REQUESTS,
        help=f"Number of concurrent requests (default: {CONCURRENT_REQUESTS})"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT_SECONDS,
        help=f"Per-request timeout in seconds (default: {REQUEST_TIMEOUT_SECONDS})"
    )

    parser.add_argument(
        "--max-queue-size",
        type=int,
        default=MAX_QUEUE_SIZE,
        help=f"Maximum number of queued day URLs (default: {MAX_QUEUE_SIZE})"
    )

    parser.add_argument(
        "--on-malformed",
        choices=[p.value for p in ErrorPolicy],
        default=ErrorPolicy.ABORT.value,
        help="What to do with a page whose venue/genre line can't be split (default: abort)"
    )

    parser.add_argument(
        "--no-stdout",
        action="store_true",
        help="Don't echo the JSON result to stdout"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    configure_logging(verbose=args.verbose, fmt=LOG_FORMAT)

    try:
        scraper = AsyncMorgengrauScraper(
            start_date=args.start_date,
            end_date=args.end_date,
            output=args.output,
            concurrent_requests=args.concurrent,
            request_timeout=args.timeout,
            max_queue_size=args.max_queue_size,
            on_malformed=ErrorPolicy(args.on_malformed),
            stream=None if args.no_stdout else sys.stdout,
        )
        scraper.run()
    except MorgengrauError as e:
        logger.error("crawl_failed", error=str(e), error_type=type(e).__name__)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("interrupted")
        sys.exit(1)


if __name__ == "__main__":
    main()
