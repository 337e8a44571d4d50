"""Per-city weather handler and the failure-to-HTTP error mapper."""

import logging
from collections.abc import Awaitable, Callable
from functools import partial

from fastapi.responses import JSONResponse

from cwa_gateway.errors import NotFoundError, UpstreamError
from cwa_gateway.ingest.city_resolver import resolve
from cwa_gateway.ingest.normalizer import WeatherNormalizer
from cwa_gateway.models.common import CityKey

logger = logging.getLogger(__name__)

UPSTREAM_FALLBACK_MESSAGE = "unable to fetch weather data"
SERVER_FALLBACK_MESSAGE = "unable to fetch weather data, please try again later"

RequestHandler = Callable[[], Awaitable[JSONResponse]]


def map_error(exc: Exception) -> tuple[int, dict]:
    """Map any failure to exactly one (status, body) pair."""
    if isinstance(exc, UpstreamError):
        body = exc.body
        message = body.get("message") if isinstance(body, dict) else None
        return exc.status_code, {
            "error": "upstream API error",
            "message": message or UPSTREAM_FALLBACK_MESSAGE,
            "details": body,
        }
    if isinstance(exc, NotFoundError):
        # No dedicated 404 for a locale missing from the dataset.
        return 500, {"error": "server error", "message": str(exc)}
    return 500, {
        "error": "server error",
        "message": str(exc) or SERVER_FALLBACK_MESSAGE,
    }


async def handle_city_weather(
    city_key: CityKey, normalizer: WeatherNormalizer
) -> JSONResponse:
    """Fetch and wrap the forecast for one city in a success or error envelope."""
    try:
        locale_name = resolve(city_key)
        forecast = await normalizer.fetch_forecast(locale_name)
    except Exception as e:
        logger.error("Failed to fetch weather for %s: %s", city_key, e)
        status, body = map_error(e)
        return JSONResponse(status_code=status, content=body)

    return JSONResponse({"success": True, "data": forecast.to_dict()})


def handler_for(city_key: CityKey, normalizer: WeatherNormalizer) -> RequestHandler:
    """Bind a city key to the generic handler. No I/O happens here."""
    return partial(handle_city_weather, city_key, normalizer)
