import asyncio
import io
import json

import pytest

from morgengrau.pipeline.accumulator import EventAccumulator, prepare_output, render_events, write_events
from morgengrau.pipeline.errors import OutputFileError
from morgengrau.pipeline.extract_events import Event


def test_concurrent_appends_are_all_kept():
    async def fill() -> list[Event]:
        accumulator = EventAccumulator()

        async def add(i: int) -> None:
            await asyncio.sleep(0)
            await accumulator.append(Event(title=f"event {i}"))

        await asyncio.gather(*(add(i) for i in range(200)))
        return await accumulator.snapshot()

    events = asyncio.run(fill())
    assert len(events) == 200
    assert {e.title for e in events} == {f"event {i}" for i in range(200)}


def test_render_events_field_order_and_indent():
    payload = render_events([Event(date="03/01/2004", venue="Gewölbe", link="https://x")])
    assert list(json.loads(payload)[0]) == ["date", "venue", "genre", "title", "text", "link"]
    assert '\n  {\n    "date": "03/01/2004"' in payload
    assert "Gewölbe" in payload


def test_write_events_writes_file_and_stream(tmp_path):
    out = tmp_path / "data" / "events.json"
    prepare_output(out)
    stream = io.StringIO()

    write_events([Event(title="A")], out, stream)

    assert json.loads(out.read_text(encoding="utf-8"))[0]["title"] == "A"
    assert json.loads(stream.getvalue()) == json.loads(out.read_text(encoding="utf-8"))


def test_write_failure_raises_after_stream_echo(tmp_path):
    stream = io.StringIO()
    target = tmp_path / "is_a_dir"
    target.mkdir()

    with pytest.raises(OutputFileError):
        write_events([Event(title="kept")], target, stream)

    assert json.loads(stream.getvalue())[0]["title"] == "kept"


def test_prepare_output_fails_when_parent_is_a_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(OutputFileError):
        prepare_output(blocker / "events.json")


def test_prepare_output_truncates_previous_results(tmp_path):
    out = tmp_path / "events.json"
    out.write_text('[{"title": "stale"}]', encoding="utf-8")
    prepare_output(out)
    assert out.read_text(encoding="utf-8") == ""
