"""docbridge Package.

docbridge connects a caller's connection options to the MongoDB driver and streams query results out as JSON. It has
two independent parts:

-   **Data Sources**: `DataSource` parses a comma separated host string and an `OptionsRecord` into a validated client
    configuration and credential, then owns the resulting `pymongo.MongoClient` and the database bound by name.
-   **JSON Streaming**: `CursorJSONAdapter` pulls documents from a cursor one at a time and writes them into a JSON
    sink as a single array, never holding more than one document's text in memory.

Note:
This `__init__.py` file uses a custom `__getattr__` to lazily load the public symbols, so importing the package doesn't
import pymongo until something that needs it is used.
"""
import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docbridge.configuration import ClientConfiguration, build_configuration
    from docbridge.credentials import Credential, build_credential
    from docbridge.data_source import DataSource
    from docbridge.endpoints import EndpointSpec, parse_endpoints
    from docbridge.exceptions import ConfigurationError, ConnectFailed, NotInitialized, StreamError
    from docbridge.json_stream import CursorJSONAdapter
    from docbridge.json_writer import JSONStreamWriter
    from docbridge.options import OptionsRecord
    from docbridge.sink_protocol import JSONSink

__lookup = {
    "ClientConfiguration": "docbridge.configuration",
    "build_configuration": "docbridge.configuration",
    "Credential": "docbridge.credentials",
    "build_credential": "docbridge.credentials",
    "DataSource": "docbridge.data_source",
    "EndpointSpec": "docbridge.endpoints",
    "parse_endpoints": "docbridge.endpoints",
    "ConfigurationError": "docbridge.exceptions",
    "ConnectFailed": "docbridge.exceptions",
    "NotInitialized": "docbridge.exceptions",
    "StreamError": "docbridge.exceptions",
    "CursorJSONAdapter": "docbridge.json_stream",
    "JSONStreamWriter": "docbridge.json_writer",
    "OptionsRecord": "docbridge.options",
    "JSONSink": "docbridge.sink_protocol",
}

__all__ = list(__lookup.keys())


def __getattr__(name):
    """Lazily loads the public symbols of the docbridge package from their submodules.

    Raises:
        ImportError: If a symbol listed in `__lookup` cannot be imported from its module.
        AttributeError: If the requested name is not a public symbol.
    """
    if name in __lookup:
        try:
            module = importlib.import_module(__lookup[name])
        except Exception as e:
            raise ImportError(f"Failed to import {name} from {__lookup[name]}: {e}") from e

        return getattr(module, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
