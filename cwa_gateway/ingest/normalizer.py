"""Weather normalizer: turns CWA element-oriented forecasts into per-interval records."""

import logging
from collections.abc import Callable

from cwa_gateway.config.schema import GatewayConfig
from cwa_gateway.errors import (
    MalformedUpstreamDataError,
    MissingCredentialError,
    NotFoundError,
)
from cwa_gateway.ingest.cwa_client import CwaClient
from cwa_gateway.models.forecast import ForecastInterval, NormalizedForecast

logger = logging.getLogger(__name__)


def _set_weather(interval: ForecastInterval, value: str) -> None:
    interval.weather = value


def _set_rain(interval: ForecastInterval, value: str) -> None:
    interval.rain = f"{value}%"


def _set_min_temp(interval: ForecastInterval, value: str) -> None:
    interval.min_temp = f"{value}°C"


def _set_max_temp(interval: ForecastInterval, value: str) -> None:
    interval.max_temp = f"{value}°C"


def _set_comfort(interval: ForecastInterval, value: str) -> None:
    interval.comfort = value


def _set_wind_speed(interval: ForecastInterval, value: str) -> None:
    interval.wind_speed = value


# CWA elementName -> field assignment. Codes not listed here are skipped.
ELEMENT_SETTERS: dict[str, Callable[[ForecastInterval, str], None]] = {
    "Wx": _set_weather,
    "PoP": _set_rain,
    "MinT": _set_min_temp,
    "MaxT": _set_max_temp,
    "CI": _set_comfort,
    "WS": _set_wind_speed,
}


class WeatherNormalizer:
    def __init__(self, config: GatewayConfig, client: CwaClient | None = None):
        self.config = config
        self.client = client or CwaClient(config.upstream)

    async def fetch_forecast(self, locale_name: str) -> NormalizedForecast:
        """Fetch the 36-hour forecast for a locale and normalize it."""
        if not self.config.api_key:
            raise MissingCredentialError("CWA_API_KEY is not configured")

        raw = await self.client.get_forecast(self.config.api_key, locale_name)
        forecast = normalize_forecast(raw, locale_name)
        logger.info(
            "Normalized %d intervals for %s", len(forecast.forecasts), locale_name
        )
        return forecast


def normalize_forecast(raw: dict, locale_name: str) -> NormalizedForecast:
    """Build a NormalizedForecast from a raw F-C0032-001 response.

    The first weather element's time series is authoritative for the interval
    boundaries; every other element must carry a series of the same length.
    """
    records = raw.get("records") if isinstance(raw, dict) else None
    if not isinstance(records, dict):
        raise MalformedUpstreamDataError("CWA response missing 'records' object")

    location = _find_location(records, locale_name)
    elements = location.get("weatherElement")
    if not isinstance(elements, list) or not elements:
        raise MalformedUpstreamDataError(
            f"Location {locale_name} has no weather elements"
        )

    series = [_time_series(e) for e in elements]
    interval_count = len(series[0])
    for element, times in zip(elements, series):
        if len(times) != interval_count:
            raise MalformedUpstreamDataError(
                f"Element {element.get('elementName')!r} has {len(times)} intervals, "
                f"expected {interval_count}"
            )

    forecasts: list[ForecastInterval] = []
    for i in range(interval_count):
        first = series[0][i]
        if not isinstance(first, dict):
            raise MalformedUpstreamDataError(f"Time entry {i} is not an object")
        interval = ForecastInterval(
            start_time=first.get("startTime", ""),
            end_time=first.get("endTime", ""),
        )
        for element, times in zip(elements, series):
            setter = ELEMENT_SETTERS.get(element.get("elementName"))
            if setter is not None:
                setter(interval, _parameter_name(times[i], element))
        forecasts.append(interval)

    return NormalizedForecast(
        city=location.get("locationName", locale_name),
        update_time=records.get("datasetDescription", ""),
        forecasts=forecasts,
    )


def _find_location(records: dict, locale_name: str) -> dict:
    locations = records.get("location")
    if not isinstance(locations, list):
        raise MalformedUpstreamDataError("CWA response missing 'records.location' list")
    for loc in locations:
        if isinstance(loc, dict) and loc.get("locationName") == locale_name:
            return loc
    raise NotFoundError(locale_name)


def _time_series(element: dict) -> list[dict]:
    times = element.get("time") if isinstance(element, dict) else None
    if not isinstance(times, list):
        raise MalformedUpstreamDataError("Weather element missing 'time' list")
    return times


def _parameter_name(entry: dict, element: dict) -> str:
    try:
        value = entry["parameter"]["parameterName"]
    except (KeyError, TypeError) as e:
        raise MalformedUpstreamDataError(
            f"Element {element.get('elementName')!r} entry missing parameterName"
        ) from e
    if value is None:
        raise MalformedUpstreamDataError(
            f"Element {element.get('elementName')!r} entry has null parameterName"
        )
    return str(value)
