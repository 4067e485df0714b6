from typing import Any, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from docbridge.data_source import DataSource


class BaseDataSourceException(Exception):
    """Base exception for data source exceptions."""
    def __init__(self, *args, data_source: "DataSource | Type[DataSource] | None" = None):
        super().__init__(*args)

        self.data_source = data_source
        if data_source:
            self.add_note(f" - Using DataSource: {data_source!r}")


class ConfigurationError(BaseDataSourceException):
    """Raised when a host string or an option value cannot be turned into a client configuration. Always raised before
    any network resource is opened."""
    def __init__(
        self,
        *args,
        field: str | None = None,
        value: Any = None,
        data_source: "DataSource | Type[DataSource] | None" = None,
    ):
        super().__init__(*args, data_source=data_source)

        self.field = field
        self.value = value
        if field:
            self.add_note(f" - Option: {field}={value!r}")


class ConnectFailed(BaseDataSourceException):
    """Raised when the driver fails to construct a client for a data source."""


class NotInitialized(BaseDataSourceException):
    """Raised when the client or database of a data source is accessed before it was initialized or after it was
    closed."""


class StreamError(BaseDataSourceException):
    """Raised when a cursor cannot be streamed into a JSON sink, either because the sink failed to write or because a
    document's text was malformed."""
