"""
MongoDB Data Source

A `DataSource` owns one `pymongo.MongoClient` and the database bound by name for the lifetime of a connector. It is
initialized once from a host string, a database name, and an optional `OptionsRecord`:

1.  **Validation**: The host string is parsed into endpoints, the options are mapped to a client configuration, and a
    credential is assembled if the options have both a username and a password. Any `ConfigurationError` is raised
    here, before any network resource exists.
2.  **Connection**: The client is constructed from the endpoints, the configuration, and the credential. Driver
    failures are raised as `ConnectFailed` and leave the data source uninitialized.
3.  **Binding**: The database is bound by name. Its existence isn't checked, MongoDB creates databases on first write.

Initialization must happen at most once per data source. Calling `init` on a data source that is already initialized
is not supported and is not guarded against.

Example:
    ```python
    from docbridge import DataSource, OptionsRecord

    options = OptionsRecord(username="app", password="secret", server_selection_timeout=5000)
    with DataSource.connect("db1:27017,db2:27018", "inventory", options) as data_source:
        cursor = data_source.database["items"].find({"in_stock": True})
        ...
    ```
"""
import logging
from typing import Any, Callable

import pymongo.errors
from pymongo import MongoClient
from pymongo.database import Database
from tramp.optionals import Optional

from docbridge.configuration import build_configuration
from docbridge.credentials import build_credential
from docbridge.endpoints import parse_endpoints
from docbridge.exceptions import ConfigurationError, ConnectFailed, NotInitialized
from docbridge.options import OptionsRecord


LOG = logging.getLogger(__name__)

ClientFactory = Callable[..., MongoClient]


class DataSource:
    """Owns a MongoDB client and the database it is bound to.

    Attributes:
        client: The underlying MongoClient instance
        database: The Database instance for the bound database name
    """
    def __init__(self, client_factory: ClientFactory = MongoClient):
        """
        Args:
            client_factory: Callable used to construct the client, receives the same arguments as `MongoClient`
        """
        self._client_factory = client_factory
        self._client: MongoClient | None = None
        self._db: Database | None = None
        self._database_name: str | None = None

    @classmethod
    def connect(
        cls,
        host: str,
        database_name: str,
        options: OptionsRecord | None = None,
        *,
        client_factory: ClientFactory = MongoClient,
    ) -> "DataSource":
        """Creates a new data source and initializes it.

        Args:
            host: Comma separated `host[:port]` list of servers
            database_name: Name of the database to bind
            options: Optional connection options, when omitted every driver default is used
            client_factory: Callable used to construct the client

        Returns:
            An initialized DataSource

        Raises:
            ConfigurationError: If the host string or the options are invalid
            ConnectFailed: If the driver fails to construct the client
        """
        return cls(client_factory).init(host, database_name, options)

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            raise NotInitialized("The data source has no client, it must be initialized first", data_source=self)

        return self._client

    @property
    def database(self) -> Database:
        if self._db is None:
            raise NotInitialized("The data source has no database, it must be initialized first", data_source=self)

        return self._db

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    def init(self, host: str, database_name: str, options: OptionsRecord | None = None) -> "DataSource":
        """Opens the client and binds the database. This must only be called once.

        Args:
            host: Comma separated `host[:port]` list of servers
            database_name: Name of the database to bind
            options: Optional connection options, when omitted every driver default is used

        Returns:
            The data source, to allow chaining

        Raises:
            ConfigurationError: If the host string or the options are invalid
            ConnectFailed: If the driver fails to construct the client
        """
        client_kwargs = self._build_client_kwargs(host, database_name, options)
        client = self._open_client(client_kwargs)
        try:
            database = client.get_database(database_name)
        except pymongo.errors.InvalidName as error:
            client.close()
            raise ConfigurationError(
                f"Invalid database name {database_name!r}: {error}",
                field="database",
                value=database_name,
                data_source=self,
            ) from error

        self._client = client
        self._db = database
        self._database_name = database_name
        LOG.info("Opened data source for database %r on %s", database_name, ", ".join(client_kwargs["host"]))
        return self

    def close(self):
        """Closes the client, releasing the connection pool. The data source can't be used after it is closed."""
        if self._client is None:
            return

        self._client.close()
        LOG.info("Closed data source for database %r", self._database_name)
        self._client = None
        self._db = None

    def _build_client_kwargs(
        self, host: str, database_name: str, options: OptionsRecord | None
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"host": [str(endpoint) for endpoint in parse_endpoints(host)]}
        if options is None:
            return kwargs

        kwargs |= build_configuration(options).as_client_kwargs()
        match build_credential(options, database_name):
            case Optional.Some(credential):
                kwargs |= credential.as_client_kwargs()

        return kwargs

    def _open_client(self, client_kwargs: dict[str, Any]) -> MongoClient:
        try:
            return self._client_factory(**client_kwargs)

        except pymongo.errors.ConfigurationError as error:
            raise ConfigurationError(f"The driver rejected the configuration: {error}", data_source=self) from error

        except pymongo.errors.PyMongoError as error:
            raise ConnectFailed(f"Failed to initialize MongoDB client: {error}", data_source=self) from error

    def __enter__(self) -> "DataSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        state = "initialized" if self.is_initialized else "uninitialized"
        return f"<{type(self).__name__} database={self._database_name!r} {state}>"
