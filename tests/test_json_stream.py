import io
import json
from datetime import datetime, timezone

import pytest
from bson import ObjectId

from docbridge.exceptions import StreamError
from docbridge.json_stream import CursorJSONAdapter
from docbridge.json_writer import JSONStreamWriter
from docbridge.sink_protocol import JSONSink


class CountingCursor:
    """A forward only cursor that counts how often it is advanced."""
    def __init__(self, documents):
        self._documents = iter(documents)
        self.next_calls = 0
        self.fetched = 0

    def __iter__(self):
        return self

    def __next__(self):
        self.next_calls += 1
        document = next(self._documents)
        self.fetched += 1
        return document


class RecordingSink:
    def __init__(self):
        self.events = []

    def write_start_array(self):
        self.events.append("start")

    def write_end_array(self):
        self.events.append("end")

    def write_raw_value(self, text):
        self.events.append(text)


class FailingSink(RecordingSink):
    def __init__(self, fail_after: int):
        super().__init__()
        self.fail_after = fail_after

    def write_raw_value(self, text):
        if len(self.events) > self.fail_after:
            raise OSError("disk full")

        super().write_raw_value(text)


def _stream(cursor) -> str:
    output = io.StringIO()
    CursorJSONAdapter(cursor).serialize_into(JSONStreamWriter(output))
    return output.getvalue()


def test_sinks_match_protocol():
    assert isinstance(RecordingSink(), JSONSink)
    assert isinstance(JSONStreamWriter(io.StringIO()), JSONSink)


def test_documents_keep_cursor_order():
    documents = [{"n": 1}, {"n": 2}, {"n": 3}]
    assert json.loads(_stream(CountingCursor(documents))) == documents


def test_one_advance_per_document_plus_terminal_check():
    cursor = CountingCursor([{"n": 1}, {"n": 2}, {"n": 3}])
    sink = RecordingSink()
    assert CursorJSONAdapter(cursor).serialize_into(sink) == 3
    assert cursor.next_calls == 4
    assert sink.events[0] == "start" and sink.events[-1] == "end"
    assert [json.loads(text) for text in sink.events[1:-1]] == [{"n": 1}, {"n": 2}, {"n": 3}]


def test_exhausted_cursor_streams_empty_array():
    cursor = CountingCursor([{"n": 1}])
    adapter = CursorJSONAdapter(cursor)
    adapter.serialize_into(RecordingSink())

    sink = RecordingSink()
    assert adapter.serialize_into(sink) == 0
    assert sink.events == ["start", "end"]


def test_empty_cursor_writes_brackets():
    assert _stream(CountingCursor([])) == "[]"


def test_bson_types_use_extended_json():
    object_id = ObjectId()
    created = datetime(2024, 1, 2, tzinfo=timezone.utc)
    [document] = json.loads(_stream(CountingCursor([{"_id": object_id, "created": created}])))
    assert document["_id"] == {"$oid": str(object_id)}
    assert document["created"] == {"$date": "2024-01-02T00:00:00Z"}


@pytest.mark.parametrize("count", [0, 1, 10, 250])
def test_holds_one_document_at_a_time(count):
    cursor = CountingCursor({"n": i} for i in range(count))

    class CheckingSink(RecordingSink):
        written = 0

        def write_raw_value(self, text):
            # Every fetched document must already be written, except the one being written now
            assert cursor.fetched - self.written == 1
            self.written += 1

    sink = CheckingSink()
    CursorJSONAdapter(cursor).serialize_into(sink)
    assert sink.written == count


def test_sink_failure_is_a_stream_error():
    cursor = CountingCursor([{"n": 1}, {"n": 2}, {"n": 3}])
    with pytest.raises(StreamError) as exc_info:
        CursorJSONAdapter(cursor).serialize_into(FailingSink(fail_after=1))

    assert isinstance(exc_info.value.__cause__, OSError)
    assert cursor.fetched == 2


def test_unserializable_document_aborts_stream():
    output = io.StringIO()
    with pytest.raises(StreamError):
        CursorJSONAdapter([{"n": 1}, {"bad": object()}, {"n": 3}]).serialize_into(JSONStreamWriter(output))

    assert output.getvalue() == '[{"n": 1}'
