import pytest
from pymongo.read_concern import ReadConcern
from pymongo.read_preferences import ReadPreference
from pymongo.write_concern import WriteConcern

from docbridge.configuration import ClientConfiguration, build_configuration
from docbridge.exceptions import ConfigurationError
from docbridge.options import OptionsRecord


def test_unset_options_use_driver_defaults():
    options = OptionsRecord(
        tls_enabled=False,
        read_concern="",
        write_concern="",
        read_preference="",
        socket_timeout=-1,
        connect_timeout=-1,
        max_pool_size=-1,
        server_selection_timeout=-1,
    )
    config = build_configuration(options)
    assert config == ClientConfiguration()
    assert config.as_client_kwargs() == {}


def test_every_option_applied():
    config = build_configuration(
        OptionsRecord(
            tls_enabled=True,
            read_concern="MAJORITY",
            write_concern="journaled",
            read_preference="secondaryPreferred",
            socket_timeout=1000,
            connect_timeout=2000,
            max_pool_size=50,
            server_selection_timeout=3000,
        )
    )
    assert config == ClientConfiguration(
        tls=True,
        read_concern=ReadConcern("majority"),
        write_concern=WriteConcern(w=1, j=True),
        read_preference=ReadPreference.SECONDARY_PREFERRED,
        socket_timeout_ms=1000,
        connect_timeout_ms=2000,
        max_pool_size=50,
        server_selection_timeout_ms=3000,
    )
    assert config.as_client_kwargs() == {
        "tls": True,
        "readConcernLevel": "majority",
        "w": 1,
        "journal": True,
        "readPreference": "secondaryPreferred",
        "socketTimeoutMS": 1000,
        "connectTimeoutMS": 2000,
        "maxPoolSize": 50,
        "serverSelectionTimeoutMS": 3000,
    }


def test_options_apply_independently():
    config = build_configuration(OptionsRecord(connect_timeout=0))
    assert config == ClientConfiguration(connect_timeout_ms=0)
    assert config.as_client_kwargs() == {"connectTimeoutMS": 0}


@pytest.mark.parametrize(
    "name, expected",
    [
        ("acknowledged", {"w": 1}),
        ("W2", {"w": 2}),
        ("unacknowledged", {"w": 0}),
        ("majority", {"w": "majority"}),
    ],
)
def test_named_write_concerns(name, expected):
    assert build_configuration(OptionsRecord(write_concern=name)).as_client_kwargs() == expected


@pytest.mark.parametrize(
    "field, options",
    [
        ("read_concern", OptionsRecord(read_concern="eventual")),
        ("write_concern", OptionsRecord(write_concern="w4")),
        ("read_preference", OptionsRecord(read_preference="fastest")),
        ("socket_timeout", OptionsRecord(socket_timeout=-2)),
        ("max_pool_size", OptionsRecord(max_pool_size=-100)),
    ],
)
def test_invalid_option_names_field_and_value(field, options):
    with pytest.raises(ConfigurationError) as exc_info:
        build_configuration(options)

    assert exc_info.value.field == field
    assert exc_info.value.value == getattr(options, field)
