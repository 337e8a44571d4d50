"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from cwa_gateway.config.schema import GatewayConfig, UpstreamConfig

TEST_BASE_URL = "https://test-cwa.example.com/api"
FORECAST_URL = f"{TEST_BASE_URL}/v1/rest/datastore/F-C0032-001"

_FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return _FIXTURE_DIR


@pytest.fixture
def taipei_payload() -> dict:
    """Raw CWA F-C0032-001 response for Taipei (3 intervals, 6 elements)."""
    with open(_FIXTURE_DIR / "cwa_forecast_taipei.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Config pointing at a fake upstream with a test API key."""
    return GatewayConfig(
        api_key="test-key-123",
        upstream=UpstreamConfig(base_url=TEST_BASE_URL, timeout_seconds=5.0),
    )


@pytest.fixture
def no_key_config(gateway_config: GatewayConfig) -> GatewayConfig:
    return gateway_config.model_copy(update={"api_key": None})


@pytest.fixture
def forecast_url() -> str:
    """URL of the forecast datastore on the fake upstream."""
    return FORECAST_URL
