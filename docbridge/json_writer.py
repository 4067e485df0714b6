import json
from typing import TextIO

from docbridge.exceptions import StreamError


class JSONStreamWriter:
    """A JSON sink that writes arrays of pre-serialized values to a text stream as they arrive.

    Values are only accepted inside an open array. Each value is checked to be well-formed JSON before it's written
    unless `validate` is `False`.
    """
    def __init__(self, stream: TextIO, *, validate: bool = True):
        self._stream = stream
        self._validate = validate
        # Number of elements written to each open array, innermost last
        self._open_arrays: list[int] = []

    @property
    def depth(self) -> int:
        return len(self._open_arrays)

    def write_start_array(self):
        if self._open_arrays:
            self._write_separator()

        self._stream.write("[")
        self._open_arrays.append(0)

    def write_end_array(self):
        if not self._open_arrays:
            raise StreamError("Cannot end an array, there is no open array")

        self._open_arrays.pop()
        self._stream.write("]")

    def write_raw_value(self, text: str):
        if not self._open_arrays:
            raise StreamError("Cannot write a value, there is no open array")

        if self._validate:
            try:
                json.loads(text)
            except json.JSONDecodeError as error:
                raise StreamError(f"Value is not well-formed JSON: {error}") from error

        self._write_separator()
        self._stream.write(text)

    def _write_separator(self):
        if self._open_arrays[~0]:
            self._stream.write(",")

        self._open_arrays[~0] += 1

    def __repr__(self) -> str:
        return f"<{type(self).__name__} depth={self.depth}>"
