from typing import Protocol, runtime_checkable


@runtime_checkable
class JSONSink(Protocol):
    def write_start_array(self):
        ...

    def write_end_array(self):
        ...

    def write_raw_value(self, text: str):
        ...
