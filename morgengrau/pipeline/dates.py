"""
Day enumeration and search URL building for the daily event search.
"""

import calendar
from datetime import date
from typing import Iterator, Optional
from urllib.parse import SplitResult, parse_qsl, urlencode, urlsplit, urlunsplit

from morgengrau.pipeline.config import ORIGIN_YEAR, SEARCH_URL, STATIC_SEARCH_PARAMS
from morgengrau.pipeline.errors import ConfigurationError


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month, leap years included."""
    return calendar.monthrange(year, month)[1]


def crawl_range(origin_year: int = ORIGIN_YEAR, today: Optional[date] = None) -> tuple[date, date]:
    """Full crawl window: Jan 1st of the origin year to Dec 31st of this year."""
    today = today or date.today()
    return date(origin_year, 1, 1), date(today.year, 12, 31)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive."""
    for year in range(start.year, end.year + 1):
        for month in range(1, 13):
            for day in range(1, days_in_month(year, month) + 1):
                current = date(year, month, day)
                if current < start:
                    continue
                if current > end:
                    return
                yield current


def parse_base_url(base_url: str) -> SplitResult:
    """Split and validate the search endpoint URL."""
    parts = urlsplit(base_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(f"Malformed search URL: {base_url!r}")
    return parts


def _url_for(parts: SplitResult, day: date) -> str:
    params = dict(STATIC_SEARCH_PARAMS)
    params.update(parse_qsl(parts.query))
    params["year"] = str(day.year)
    params["month"] = str(day.month)
    params["day"] = str(day.day)
    return urlunsplit(parts._replace(query=urlencode(params)))


def build_search_url(base_url: str, day: date) -> str:
    """Build the search URL for a single day.

    e.g. day=2024-02-29 → '...event_suche_action.pl?datumundzeit=...&year=2024&month=2&day=29'
    """
    return _url_for(parse_base_url(base_url), day)


def iter_search_urls(start: date, end: date, base_url: str = SEARCH_URL) -> Iterator[str]:
    """
    Lazily build one search URL per day in [start, end].

    The base URL is validated up front, so a bad endpoint fails here
    rather than halfway through iteration.
    """
    parts = parse_base_url(base_url)
    return (_url_for(parts, day) for day in iter_days(start, end))
