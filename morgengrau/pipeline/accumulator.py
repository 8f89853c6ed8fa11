"""
Shared event collection for concurrent workers, and the JSON writer.
"""

import asyncio
import json
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, Optional, TextIO

import structlog

from morgengrau.pipeline.errors import OutputFileError
from morgengrau.pipeline.extract_events import Event

logger = structlog.get_logger(__name__)


class EventAccumulator:
    """Append-only list of events, safe to share between worker tasks.

    Order follows completion order of the fetches, not calendar order.
    """

    def __init__(self):
        self._events: list[Event] = []
        self._lock = asyncio.Lock()

    async def append(self, event: Event) -> None:
        async with self._lock:
            self._events.append(event)

    async def snapshot(self) -> list[Event]:
        """Copy of the events collected so far."""
        async with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        return len(self._events)


def render_events(events: Iterable[Event]) -> str:
    """Indented JSON array, fields in date/venue/genre/title/text/link order."""
    return json.dumps([asdict(event) for event in events], ensure_ascii=False, indent=2)


def prepare_output(path: Path) -> None:
    """Create or truncate the output file before any crawling starts.

    A run that fails later leaves the file empty rather than holding a
    previous run's events.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("", encoding="utf-8")
    except OSError as e:
        raise OutputFileError(f"Cannot create output file {path}: {e}") from e


def write_events(events: list[Event], path: Path, stream: Optional[TextIO] = None) -> str:
    """
    Write the events to ``path`` and echo them to ``stream``.

    The echo happens first, so the data is still visible when the file
    write fails. Returns the rendered JSON.
    """
    payload = render_events(events)

    if stream is not None:
        stream.write(payload + "\n")
        stream.flush()

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload)
    except OSError as e:
        logger.error("output_write_failed", path=str(path), error=str(e))
        raise OutputFileError(f"Cannot write output file {path}: {e}") from e

    logger.info("output_written", path=str(path), events=len(events))
    return payload
