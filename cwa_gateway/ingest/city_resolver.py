"""City resolver: maps a route city key to the CWA locale name."""

from cwa_gateway.config.defaults import CITY_LOCALES
from cwa_gateway.errors import ConfigurationError
from cwa_gateway.models.common import CityKey


def resolve(city_key: CityKey | str) -> str:
    """Return the CWA ``locationName`` for a city key.

    Routes are bound to the fixed key set, so an unknown key is a programming
    error rather than bad user input.
    """
    try:
        return CITY_LOCALES[city_key]
    except KeyError:
        raise ConfigurationError(f"Unknown city key: {city_key!r}") from None
