"""
Extract one event record from a morgengrau day-search result page.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

from morgengrau.pipeline.config import (
    CGI_BASE_URL,
    DATE_LABEL_PREFIX,
    DATE_LABEL_SUFFIX,
    GERMAN_MONTHS,
    NO_RESULTS_SENTINEL,
    SITE_URL,
)
from morgengrau.pipeline.errors import MalformedEventError
from morgengrau.pipeline.text_repair import decode, normalize, remove_whitespace, repair, title, trim

INFO_SELECTOR = "font"
TITLE_SELECTOR = "a.event_title"
VENUE_GENRE_SELECTOR = "span.event_dates"
TEXT_SELECTOR = "td.event_text"
LINK_SELECTOR = "a[href].event"

VENUE_GENRE_SEPARATOR = "|"

_NUMERIC_DATE_RE = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})")
_NAMED_DATE_RE = re.compile(r"(\d{1,2})\.\s*([^\W\d_]+)\s+(\d{4})")
_ISO_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}[+-]\d{4}")


@dataclass(frozen=True)
class Event:
    """Represents one scraped event listing."""
    date: str = ""
    venue: str = ""
    genre: str = ""
    title: str = ""
    text: str = ""
    link: str = ""


def format_display_date(label: str) -> str:
    """
    Convert a page date label to MM/DD/YYYY.

    Understands '01.03.2004', '1. März 2004' and source timestamps like
    '2004-03-01T00:00:00.000+0000'. Anything else is returned unchanged.
    """
    match = _ISO_TIMESTAMP_RE.search(label)
    if match:
        parsed = datetime.strptime(match.group(), "%Y-%m-%dT%H:%M:%S.%f%z")
        return parsed.strftime("%m/%d/%Y")

    match = _NUMERIC_DATE_RE.search(label)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return f"{month:02d}/{day:02d}/{year}"

    match = _NAMED_DATE_RE.search(label)
    if match:
        day, month_name, year = match.groups()
        month = GERMAN_MONTHS.get(month_name.lower())
        if month:
            return f"{month:02d}/{int(day):02d}/{year}"

    return label


def split_venue_genre(raw: str) -> tuple[str, str]:
    """Split 'Club X | Concert' into ('Club X', 'Concert')."""
    segments = decode(raw).split(VENUE_GENRE_SEPARATOR)
    if len(segments) < 2:
        raise MalformedEventError(f"unexpected venue/genre format: {raw!r}")
    return trim(segments[0]), trim(segments[1])


def build_event_link(href: str) -> str:
    """Turn an event href into an absolute URL."""
    if not href or urlsplit(href).scheme:
        return href
    if href.startswith("/"):
        return urljoin(SITE_URL, href)
    link = repair(href)
    if urlsplit(link).scheme:
        return link
    return urljoin(CGI_BASE_URL, link)


def _joined_text(soup: BeautifulSoup, selector: str) -> str:
    return "".join(el.get_text() for el in soup.select(selector)).strip()


def is_empty_day(info_text: str) -> bool:
    """True if the page says nothing was found for the day."""
    return NO_RESULTS_SENTINEL in info_text


def parse_event_page(html: Union[str, bytes], encoding: Optional[str] = None) -> Optional[Event]:
    """
    Parse a day-search page into an Event.

    ``html`` may be raw bytes; BeautifulSoup then tries ``encoding`` first
    and falls back to detection, so undeclared Latin-1 pages still parse.

    Returns None when the page carries the "nichts gefunden" sentinel.
    Missing elements leave their field empty. When a page has several
    titles, venue lines or links, the last one wins.

    Raises MalformedEventError if the venue/genre line has no '|'.
    """
    if isinstance(html, bytes):
        soup = BeautifulSoup(html, "html.parser", from_encoding=encoding)
    else:
        soup = BeautifulSoup(html, "html.parser")

    info = normalize(_joined_text(soup, INFO_SELECTOR)).strip()
    if is_empty_day(info):
        return None

    label = info.removeprefix(DATE_LABEL_PREFIX).removesuffix(DATE_LABEL_SUFFIX)

    event_title = ""
    for anchor in soup.select(TITLE_SELECTOR):
        event_title = title(anchor.get_text())

    venue = genre = ""
    for span in soup.select(VENUE_GENRE_SELECTOR):
        venue, genre = split_venue_genre(span.get_text())

    link = ""
    for anchor in soup.select(LINK_SELECTOR):
        link = build_event_link(anchor.get("href", ""))

    return Event(
        date=format_display_date(label) if label else "",
        venue=venue,
        genre=genre,
        title=event_title,
        text=remove_whitespace(_joined_text(soup, TEXT_SELECTOR)),
        link=link,
    )
