"""
Streaming Cursor Results as JSON

`CursorJSONAdapter` writes the documents of a MongoDB cursor into a JSON sink as a single array without first
collecting them into a list. Documents are pulled from the cursor one at a time, converted to their Extended JSON text,
and handed to the sink before the next document is fetched, so only one document's text is held at any point no matter
how large the result set is.

Streaming is destructive. The cursor is forward only, so a second call to `serialize_into` on a cursor that has already
been consumed writes an empty array. Releasing the cursor once streaming finishes is the job of whoever created it.

Example:
    ```python
    import sys

    from docbridge.json_stream import CursorJSONAdapter
    from docbridge.json_writer import JSONStreamWriter

    cursor = data_source.database["items"].find()
    try:
        CursorJSONAdapter(cursor).serialize_into(JSONStreamWriter(sys.stdout))
    finally:
        cursor.close()
    ```
"""
import logging
from typing import Any, Iterable, Iterator, Mapping

from bson.json_util import JSONOptions, RELAXED_JSON_OPTIONS, dumps

from docbridge.exceptions import StreamError
from docbridge.sink_protocol import JSONSink


LOG = logging.getLogger(__name__)


class CursorJSONAdapter:
    """Lazily serializes the documents of a forward only cursor into a JSON array.

    The adapter only references the cursor, it doesn't close it and must not be used after the cursor is closed.
    """
    def __init__(self, cursor: Iterable[Mapping[str, Any]], json_options: JSONOptions = RELAXED_JSON_OPTIONS):
        """
        Args:
            cursor: The cursor, or any iterator of documents
            json_options: Controls how BSON types are rendered as Extended JSON (default: relaxed mode)
        """
        self._cursor: Iterator[Mapping[str, Any]] = iter(cursor)
        self._json_options = json_options

    def iter_documents(self) -> Iterator[str]:
        """Yields the JSON text of each remaining document, advancing the cursor once per document.

        Raises:
            StreamError: If a document can't be converted to JSON
        """
        for document in self._cursor:
            try:
                text = dumps(document, json_options=self._json_options)
            except (TypeError, ValueError) as error:
                raise StreamError(f"Failed to convert document to JSON: {error}") from error

            yield text

    def serialize_into(self, sink: JSONSink) -> int:
        """Writes every remaining document in the cursor to the sink as the elements of one JSON array. Nothing is
        retried or skipped, and a partially written array is left for the sink to clean up when a write fails.

        Args:
            sink: Receives the array start, each document's text, and the array end

        Returns:
            The number of documents written

        Raises:
            StreamError: If the sink fails to write or a document's text is malformed
        """
        written = 0
        try:
            sink.write_start_array()
            for text in self.iter_documents():
                sink.write_raw_value(text)
                written += 1

            sink.write_end_array()

        except (OSError, ValueError) as error:
            raise StreamError(f"Failed to stream document {written} of the cursor: {error}") from error

        LOG.debug("Streamed %d document(s) into %r", written, sink)
        return written
