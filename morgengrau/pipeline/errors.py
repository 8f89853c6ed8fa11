"""
Error types raised by the crawl pipeline.

Nothing in the pipeline recovers locally: every error travels up to the
controller in ``scrape_morgengrau_async.main`` which logs it and exits.
The one exception is a malformed page, where ``ErrorPolicy`` decides.
"""

from enum import Enum


class ErrorPolicy(str, Enum):
    """What the scraper does with a page it cannot extract."""

    ABORT = "abort"
    """Fail the whole run (default)."""

    SKIP = "skip"
    """Log the page, count it as skipped and keep crawling."""


class MorgengrauError(Exception):
    """Base class for all crawl failures."""


class ConfigurationError(MorgengrauError):
    """Bad base URL, queue capacity exceeded or invalid run options."""


class OutputFileError(MorgengrauError):
    """The output file could not be created or written."""


class FetchError(MorgengrauError):
    """A request failed: network error, timeout or non-200 status."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Fetch failed for {url}: {reason}")
        self.url = url
        self.reason = reason


class MalformedEventError(MorgengrauError):
    """A page's venue/genre field does not split into two segments."""
