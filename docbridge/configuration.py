"""
Client Configuration for MongoDB Data Sources

This module turns an `OptionsRecord` into a `ClientConfiguration`, the validated set of client settings that is handed
to `pymongo.MongoClient`. Every option is independently optional: a field is only applied when its value in the record
is present (a non-empty string, a non-sentinel integer, or a `True` flag). Absent fields stay `None` so the driver's own
defaults are used.

The mapping from options to configuration fields is a declarative table of `OptionMapping` entries. Each entry targets
its own configuration field, so the order they are applied in doesn't matter. Validation happens while the table is
folded, and a failure raises before any configuration is returned.

Example:
    ```python
    from docbridge.configuration import build_configuration
    from docbridge.options import OptionsRecord

    config = build_configuration(OptionsRecord(read_concern="majority", max_pool_size=20))
    config.as_client_kwargs()  # {"readConcernLevel": "majority", "maxPoolSize": 20}
    ```
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable

from pymongo.read_concern import ReadConcern
from pymongo.read_preferences import ReadPreference, _ServerMode
from pymongo.write_concern import WriteConcern

from docbridge.exceptions import ConfigurationError
from docbridge.options import OptionsRecord, UNSET_INT, UNSET_STR


LOG = logging.getLogger(__name__)


READ_CONCERN_LEVELS = {
    "local": "local",
    "majority": "majority",
    "linearizable": "linearizable",
    "snapshot": "snapshot",
    "available": "available",
}

WRITE_CONCERNS = {
    "acknowledged": lambda: WriteConcern(w=1),
    "w1": lambda: WriteConcern(w=1),
    "w2": lambda: WriteConcern(w=2),
    "w3": lambda: WriteConcern(w=3),
    "unacknowledged": lambda: WriteConcern(w=0),
    "journaled": lambda: WriteConcern(w=1, j=True),
    "majority": lambda: WriteConcern(w="majority"),
}

READ_PREFERENCES = {
    "primary": ReadPreference.PRIMARY,
    "primarypreferred": ReadPreference.PRIMARY_PREFERRED,
    "secondary": ReadPreference.SECONDARY,
    "secondarypreferred": ReadPreference.SECONDARY_PREFERRED,
    "nearest": ReadPreference.NEAREST,
}


@dataclass(frozen=True)
class ClientConfiguration:
    """Driver ready client settings. A field left as `None` is not passed to the client, so the driver default
    applies.

    Attributes:
        tls: Enables TLS connections
        read_concern: Read concern applied to reads
        write_concern: Write concern applied to writes
        read_preference: Replica set member selection mode for reads
        socket_timeout_ms: Socket timeout in milliseconds
        connect_timeout_ms: Connect timeout in milliseconds
        max_pool_size: Maximum number of pooled connections per host
        server_selection_timeout_ms: Server selection timeout in milliseconds
    """
    tls: bool | None = None
    read_concern: ReadConcern | None = None
    write_concern: WriteConcern | None = None
    read_preference: _ServerMode | None = None
    socket_timeout_ms: int | None = None
    connect_timeout_ms: int | None = None
    max_pool_size: int | None = None
    server_selection_timeout_ms: int | None = None

    def as_client_kwargs(self) -> dict[str, Any]:
        """Renders the fields that are set as keyword options accepted by `pymongo.MongoClient`."""
        kwargs: dict[str, Any] = {}
        if self.tls is not None:
            kwargs["tls"] = self.tls

        if self.read_concern is not None:
            kwargs["readConcernLevel"] = self.read_concern.level

        if self.write_concern is not None:
            document = self.write_concern.document
            if "w" in document:
                kwargs["w"] = document["w"]

            if "j" in document:
                kwargs["journal"] = document["j"]

        if self.read_preference is not None:
            kwargs["readPreference"] = self.read_preference.mongos_mode

        for name, option in (
            ("socket_timeout_ms", "socketTimeoutMS"),
            ("connect_timeout_ms", "connectTimeoutMS"),
            ("max_pool_size", "maxPoolSize"),
            ("server_selection_timeout_ms", "serverSelectionTimeoutMS"),
        ):
            if (value := getattr(self, name)) is not None:
                kwargs[option] = value

        return kwargs


DEFAULT_CONFIGURATION = ClientConfiguration()


def _is_set_flag(value: bool) -> bool:
    return value


def _is_set_str(value: str) -> bool:
    return value != UNSET_STR


def _is_set_int(value: int) -> bool:
    return value != UNSET_INT


def _enable(_: str, value: bool) -> bool:
    return True


def _to_read_concern(field: str, value: str) -> ReadConcern:
    try:
        return ReadConcern(READ_CONCERN_LEVELS[value.lower()])
    except KeyError:
        raise ConfigurationError(
            f"Unknown read concern level {value!r}, expected one of {_choices(READ_CONCERN_LEVELS)}",
            field=field,
            value=value,
        ) from None


def _to_write_concern(field: str, value: str) -> WriteConcern:
    try:
        factory = WRITE_CONCERNS[value.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown write concern {value!r}, expected one of {_choices(WRITE_CONCERNS)}",
            field=field,
            value=value,
        ) from None

    return factory()


def _to_read_preference(field: str, value: str) -> _ServerMode:
    try:
        return READ_PREFERENCES[value.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown read preference {value!r}, expected one of "
            f"{', '.join(mode.mongos_mode for mode in READ_PREFERENCES.values())}",
            field=field,
            value=value,
        ) from None


def _to_non_negative_int(field: str, value: int) -> int:
    if value < 0:
        raise ConfigurationError(
            f"Option {field!r} must be a non-negative integer or {UNSET_INT} to leave it unset, got {value}",
            field=field,
            value=value,
        )

    return value


def _choices(table: Iterable[str]) -> str:
    return ", ".join(table)


@dataclass(frozen=True)
class OptionMapping:
    """Maps one options record field onto one configuration field.

    Attributes:
        option: Name of the field on the options record
        target: Name of the field on the client configuration
        is_present: Returns `True` when the option's value should be applied
        convert: Validates the option's value and converts it to the configuration's type
    """
    option: str
    target: str
    is_present: Callable[[Any], bool]
    convert: Callable[[str, Any], Any]


OPTION_MAPPINGS: tuple[OptionMapping, ...] = (
    OptionMapping("tls_enabled", "tls", _is_set_flag, _enable),
    OptionMapping("read_concern", "read_concern", _is_set_str, _to_read_concern),
    OptionMapping("write_concern", "write_concern", _is_set_str, _to_write_concern),
    OptionMapping("read_preference", "read_preference", _is_set_str, _to_read_preference),
    OptionMapping("socket_timeout", "socket_timeout_ms", _is_set_int, _to_non_negative_int),
    OptionMapping("connect_timeout", "connect_timeout_ms", _is_set_int, _to_non_negative_int),
    OptionMapping("max_pool_size", "max_pool_size", _is_set_int, _to_non_negative_int),
    OptionMapping("server_selection_timeout", "server_selection_timeout_ms", _is_set_int, _to_non_negative_int),
)


def build_configuration(options: OptionsRecord) -> ClientConfiguration:
    """Builds a client configuration from the options that are present in the record.

    Raises:
        ConfigurationError: If an option has a value the driver doesn't recognize
    """
    updates = {}
    for mapping in OPTION_MAPPINGS:
        value = getattr(options, mapping.option)
        if mapping.is_present(value):
            updates[mapping.target] = mapping.convert(mapping.option, value)

    LOG.debug("Applying configuration fields: %s", ", ".join(updates) or "none")
    return replace(DEFAULT_CONFIGURATION, **updates)
