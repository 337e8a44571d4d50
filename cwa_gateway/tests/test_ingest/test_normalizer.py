"""Tests for CWA forecast normalization."""

import asyncio
import copy
from unittest.mock import AsyncMock, MagicMock

import pytest

from cwa_gateway.config.schema import GatewayConfig
from cwa_gateway.errors import (
    MalformedUpstreamDataError,
    MissingCredentialError,
    NotFoundError,
    UpstreamError,
)
from cwa_gateway.ingest.cwa_client import CwaClient
from cwa_gateway.ingest.normalizer import WeatherNormalizer, normalize_forecast


def _elements(payload: dict) -> list[dict]:
    return payload["records"]["location"][0]["weatherElement"]


class TestNormalizeForecast:
    def test_interval_count(self, taipei_payload: dict):
        result = normalize_forecast(taipei_payload, "臺北市")
        assert len(result.forecasts) == 3

    def test_header_fields(self, taipei_payload: dict):
        result = normalize_forecast(taipei_payload, "臺北市")
        assert result.city == "臺北市"
        assert result.update_time == "三十六小時天氣預報"

    def test_first_interval_values(self, taipei_payload: dict):
        first = normalize_forecast(taipei_payload, "臺北市").forecasts[0]
        assert first.start_time == "2026-10-19 12:00:00"
        assert first.end_time == "2026-10-19 18:00:00"
        assert first.weather == "多雲時晴"
        assert first.rain == "10%"
        assert first.min_temp == "24°C"
        assert first.max_temp == "29°C"
        assert first.comfort == "舒適"
        assert first.wind_speed == "偏北風 3級"

    def test_all_fields_populated(self, taipei_payload: dict):
        for interval in normalize_forecast(taipei_payload, "臺北市").forecasts:
            assert all(interval.to_dict().values())

    def test_chronological_order(self, taipei_payload: dict):
        starts = [
            f.start_time for f in normalize_forecast(taipei_payload, "臺北市").forecasts
        ]
        assert starts == sorted(starts)

    def test_element_order_does_not_matter(self, taipei_payload: dict):
        reordered = copy.deepcopy(taipei_payload)
        _elements(reordered).reverse()
        original = normalize_forecast(taipei_payload, "臺北市").to_dict()
        assert normalize_forecast(reordered, "臺北市").to_dict() == original

    def test_unknown_element_ignored(self, taipei_payload: dict):
        extended = copy.deepcopy(taipei_payload)
        _elements(extended).append(
            {
                "elementName": "UVI",
                "time": [
                    {"startTime": t["startTime"], "endTime": t["endTime"],
                     "parameter": {"parameterName": "11"}}
                    for t in _elements(extended)[0]["time"]
                ],
            }
        )
        original = normalize_forecast(taipei_payload, "臺北市").to_dict()
        assert normalize_forecast(extended, "臺北市").to_dict() == original

    def test_missing_element_leaves_field_empty(self, taipei_payload: dict):
        partial = copy.deepcopy(taipei_payload)
        partial["records"]["location"][0]["weatherElement"] = [
            e for e in _elements(partial) if e["elementName"] != "WS"
        ]
        first = normalize_forecast(partial, "臺北市").forecasts[0]
        assert first.wind_speed == ""
        assert first.weather == "多雲時晴"

    def test_camel_case_output(self, taipei_payload: dict):
        data = normalize_forecast(taipei_payload, "臺北市").to_dict()
        assert set(data) == {"city", "updateTime", "forecasts"}
        assert list(data["forecasts"][0]) == [
            "startTime", "endTime", "weather", "rain",
            "minTemp", "maxTemp", "comfort", "windSpeed",
        ]

    def test_locale_not_found(self, taipei_payload: dict):
        with pytest.raises(NotFoundError, match="高雄市"):
            normalize_forecast(taipei_payload, "高雄市")

    def test_empty_location_list(self, taipei_payload: dict):
        empty = copy.deepcopy(taipei_payload)
        empty["records"]["location"] = []
        with pytest.raises(NotFoundError):
            normalize_forecast(empty, "臺北市")

    def test_matching_location_picked_over_first(self, taipei_payload: dict):
        multi = copy.deepcopy(taipei_payload)
        other = copy.deepcopy(multi["records"]["location"][0])
        other["locationName"] = "新北市"
        other["weatherElement"][0]["time"][0]["parameter"]["parameterName"] = "晴"
        multi["records"]["location"].insert(0, other)
        result = normalize_forecast(multi, "臺北市")
        assert result.city == "臺北市"
        assert result.forecasts[0].weather == "多雲時晴"

    def test_series_length_mismatch(self, taipei_payload: dict):
        short = copy.deepcopy(taipei_payload)
        _elements(short)[2]["time"].pop()
        with pytest.raises(MalformedUpstreamDataError, match="MinT"):
            normalize_forecast(short, "臺北市")

    def test_missing_records(self):
        with pytest.raises(MalformedUpstreamDataError, match="records"):
            normalize_forecast({"success": "true"}, "臺北市")

    def test_no_weather_elements(self, taipei_payload: dict):
        bare = copy.deepcopy(taipei_payload)
        bare["records"]["location"][0]["weatherElement"] = []
        with pytest.raises(MalformedUpstreamDataError, match="no weather elements"):
            normalize_forecast(bare, "臺北市")

    def test_missing_parameter_name(self, taipei_payload: dict):
        broken = copy.deepcopy(taipei_payload)
        del _elements(broken)[1]["time"][0]["parameter"]
        with pytest.raises(MalformedUpstreamDataError, match="PoP"):
            normalize_forecast(broken, "臺北市")

    def test_null_parameter_name(self, taipei_payload: dict):
        broken = copy.deepcopy(taipei_payload)
        _elements(broken)[1]["time"][1]["parameter"]["parameterName"] = None
        with pytest.raises(MalformedUpstreamDataError, match="PoP"):
            normalize_forecast(broken, "臺北市")


class TestWeatherNormalizer:
    def test_fetch_success(self, gateway_config: GatewayConfig, taipei_payload: dict):
        mock_client = MagicMock(spec=CwaClient)
        mock_client.get_forecast = AsyncMock(return_value=taipei_payload)

        normalizer = WeatherNormalizer(gateway_config, mock_client)
        result = asyncio.run(normalizer.fetch_forecast("臺北市"))

        assert result.city == "臺北市"
        assert len(result.forecasts) == 3
        mock_client.get_forecast.assert_awaited_once_with("test-key-123", "臺北市")

    def test_missing_credential_skips_network(self, no_key_config: GatewayConfig):
        mock_client = MagicMock(spec=CwaClient)
        mock_client.get_forecast = AsyncMock()

        normalizer = WeatherNormalizer(no_key_config, mock_client)
        with pytest.raises(MissingCredentialError):
            asyncio.run(normalizer.fetch_forecast("臺北市"))
        mock_client.get_forecast.assert_not_called()

    def test_upstream_error_propagates(self, gateway_config: GatewayConfig):
        mock_client = MagicMock(spec=CwaClient)
        mock_client.get_forecast = AsyncMock(
            side_effect=UpstreamError("HTTP 503", 503, {"message": "maintenance"})
        )

        normalizer = WeatherNormalizer(gateway_config, mock_client)
        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(normalizer.fetch_forecast("臺北市"))
        assert exc_info.value.status_code == 503

    def test_default_client_from_config(self, gateway_config: GatewayConfig):
        normalizer = WeatherNormalizer(gateway_config)
        assert normalizer.client.base_url == "https://test-cwa.example.com/api"
