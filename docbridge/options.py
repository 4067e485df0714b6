"""
Options Record for Configuring a Data Source

The options record is the fixed-shape structure a caller hands to `DataSource.init`. It has no optional or nullable
fields, so "not set" is expressed with sentinel values instead:

- String fields use the empty string
- Integer fields use `-1`
- The TLS flag is simply `False`

Callers that integrate through positional access rely on the slot ordering exposed by `get_boolean_field`,
`get_string_field`, and `get_int_field`, so that ordering is part of the external contract and must not change.

Example:
    ```python
    from docbridge.options import OptionsRecord

    options = OptionsRecord(read_preference="secondaryPreferred", connect_timeout=2000)
    options.get_string_field(2)  # "secondaryPreferred"
    options.get_int_field(0)  # -1, socket timeout is unset

    options = OptionsRecord.from_dict({"username": "app", "password": "secret"})
    ```
"""
from dataclasses import dataclass, fields
from typing import Any, Mapping

from docbridge.exceptions import ConfigurationError


UNSET_INT = -1
UNSET_STR = ""


@dataclass(frozen=True)
class OptionsRecord:
    """Caller supplied connection options using sentinel values for unset fields.

    Attributes:
        tls_enabled: Enables TLS for every connection when `True`
        read_concern: Read concern level name (default: unset)
        write_concern: Named write concern (default: unset)
        read_preference: Read preference mode name (default: unset)
        username: Username used to authenticate against the bound database (default: unset)
        password: Password used to authenticate against the bound database (default: unset)
        socket_timeout: Socket timeout in milliseconds (default: unset)
        connect_timeout: Connect timeout in milliseconds (default: unset)
        max_pool_size: Maximum number of pooled connections per host (default: unset)
        server_selection_timeout: Server selection timeout in milliseconds (default: unset)
    """
    tls_enabled: bool = False
    read_concern: str = UNSET_STR
    write_concern: str = UNSET_STR
    read_preference: str = UNSET_STR
    username: str = UNSET_STR
    password: str = UNSET_STR
    socket_timeout: int = UNSET_INT
    connect_timeout: int = UNSET_INT
    max_pool_size: int = UNSET_INT
    server_selection_timeout: int = UNSET_INT

    # Slot orderings are part of the external contract
    _boolean_slots = ("tls_enabled",)
    _string_slots = ("read_concern", "write_concern", "read_preference", "username", "password")
    _int_slots = ("socket_timeout", "connect_timeout", "max_pool_size", "server_selection_timeout")

    def get_boolean_field(self, index: int) -> bool:
        return getattr(self, self._slot_name(self._boolean_slots, index))

    def get_string_field(self, index: int) -> str:
        return getattr(self, self._slot_name(self._string_slots, index))

    def get_int_field(self, index: int) -> int:
        return getattr(self, self._slot_name(self._int_slots, index))

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "OptionsRecord":
        """Builds an options record from a loosely typed mapping. Missing keys are left unset, `None` values are
        treated as unset, and unknown keys are rejected.

        Args:
            options: A mapping of option names to values

        Returns:
            A new OptionsRecord

        Raises:
            ConfigurationError: If the mapping contains an unknown key or a value of the wrong type
        """
        known = {f.name: f for f in fields(cls)}
        values = {}
        for name, value in options.items():
            if name not in known:
                raise ConfigurationError(f"Unknown data source option: {name!r}", field=name, value=value)

            if value is None:
                continue

            expected = known[name].type
            # bool is an int subclass, it must not be accepted for integer slots
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigurationError(
                    f"Option {name!r} must be of type {expected.__name__}, got {type(value).__name__}",
                    field=name,
                    value=value,
                )

            values[name] = value

        return cls(**values)

    @staticmethod
    def _slot_name(slots: tuple[str, ...], index: int) -> str:
        if not 0 <= index < len(slots):
            raise IndexError(f"Field index {index} is out of range, there are {len(slots)} fields of that type")

        return slots[index]
