"""The six special municipalities served by the gateway, with CWA locale names."""

from cwa_gateway.config.schema import CityConfig
from cwa_gateway.models.common import CityKey

DEFAULT_CITIES: list[CityConfig] = [
    CityConfig(key=CityKey.TAIPEI, locale_name="臺北市", label="taipei"),
    CityConfig(key=CityKey.NEW_TAIPEI, locale_name="新北市", label="newTaipei"),
    CityConfig(key=CityKey.TAOYUAN, locale_name="桃園市", label="taoyuan"),
    CityConfig(key=CityKey.TAICHUNG, locale_name="臺中市", label="taichung"),
    CityConfig(key=CityKey.TAINAN, locale_name="臺南市", label="tainan"),
    CityConfig(key=CityKey.KAOHSIUNG, locale_name="高雄市", label="kaohsiung"),
]

CITY_LOCALES: dict[str, str] = {c.key: c.locale_name for c in DEFAULT_CITIES}
