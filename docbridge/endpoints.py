import logging
from dataclasses import dataclass

from pymongo import MongoClient

from docbridge.exceptions import ConfigurationError


LOG = logging.getLogger(__name__)

DEFAULT_PORT: int = MongoClient.PORT
MAX_PORT = 65535


@dataclass(frozen=True)
class EndpointSpec:
    """A single server endpoint taken from a host string.

    Attributes:
        host: Hostname or IP address of the server, may be empty when the host string had an empty segment
        port: Port number the server is listening on
    """
    host: str
    port: int = DEFAULT_PORT

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def parse_endpoints(host_str: str) -> list[EndpointSpec]:
    """Parses a comma separated list of `host[:port]` tokens into endpoints, in the order they were given. Tokens are
    not trimmed and empty tokens are kept as empty host names.

    Raises:
        ConfigurationError: If any token has a port that isn't a positive integer
    """
    endpoints = [parse_endpoint(segment) for segment in host_str.split(",")]
    LOG.debug("Parsed %d endpoint(s) from host string %r", len(endpoints), host_str)
    return endpoints


def parse_endpoint(host_str: str) -> EndpointSpec:
    match host_str.split(":"):
        case [host]:
            return EndpointSpec(host)

        case [host, port]:
            return EndpointSpec(host, _parse_port(port, host_str))

        case _:
            raise ConfigurationError(
                f"The host string must have the form host[:port]: {host_str!r}", field="host", value=host_str
            )


def _parse_port(port: str, host_str: str) -> int:
    # int() would also accept signs, whitespace, and underscores
    if not (port.isascii() and port.isdigit()):
        raise ConfigurationError(
            f"The port of the host string must be an integer: {host_str!r}", field="host", value=host_str
        )

    value = int(port, 10)
    if not 0 < value <= MAX_PORT:
        raise ConfigurationError(
            f"The port of the host string must be between 1 and {MAX_PORT}: {host_str!r}",
            field="host",
            value=host_str,
        )

    return value
