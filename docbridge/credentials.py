from dataclasses import dataclass, field

from tramp.optionals import Optional

from docbridge.options import OptionsRecord, UNSET_STR


@dataclass(frozen=True)
class Credential:
    """Username and password authenticated against the database they were created for.

    Attributes:
        username: Name of the user to authenticate as
        database: Database the user is defined in, used as the auth source
        password: The user's password, hidden from the repr
    """
    username: str
    database: str
    password: str = field(repr=False)

    def as_client_kwargs(self) -> dict[str, str]:
        return {
            "username": self.username,
            "password": self.password,
            "authSource": self.database,
        }


def build_credential(options: OptionsRecord, database: str) -> Optional[Credential]:
    """Creates a credential for the database when the options have both a username and a password. Having only one
    of them is not an error, it just means there is no credential."""
    if options.username == UNSET_STR or options.password == UNSET_STR:
        return Optional.Nothing()

    return Optional.Some(Credential(options.username, database, options.password))
