"""Async client for the CWA open-data forecast datastore."""

import logging
from typing import Any

import httpx

from cwa_gateway.config.schema import UpstreamConfig
from cwa_gateway.errors import MalformedUpstreamDataError, UpstreamError

logger = logging.getLogger(__name__)


class CwaClient:
    def __init__(self, upstream: UpstreamConfig):
        self.base_url = upstream.base_url.rstrip("/")
        self.path = upstream.forecast_path
        self.timeout = upstream.timeout_seconds

    async def get_forecast(self, api_key: str, locale_name: str) -> dict:
        """Fetch the 36-hour forecast dataset for one locale.

        Raises UpstreamError with the upstream status and body on any non-2xx
        answer, and with status 502 when the request never got a response.
        """
        url = f"{self.base_url}{self.path}"
        params = {"Authorization": api_key, "locationName": locale_name}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url, params=params)
        except httpx.RequestError as e:
            logger.error("CWA request failed for %s: %s", locale_name, e)
            raise UpstreamError(f"Request failed: {e}", 502) from e

        if resp.status_code >= 400:
            body = _decode_body(resp)
            logger.warning(
                "CWA API %d for %s: %s", resp.status_code, locale_name, resp.text[:200]
            )
            raise UpstreamError(f"HTTP {resp.status_code}", resp.status_code, body)

        try:
            return resp.json()
        except ValueError as e:
            raise MalformedUpstreamDataError("CWA API returned a non-JSON body") from e


def _decode_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text
