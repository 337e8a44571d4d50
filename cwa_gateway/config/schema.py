"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

from cwa_gateway.models.common import CityKey


class CityConfig(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    key: CityKey
    locale_name: str
    label: str


class UpstreamConfig(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    base_url: str = "https://opendata.cwa.gov.tw/api"
    dataset_id: str = "F-C0032-001"  # general 36-hour forecast
    timeout_seconds: float = Field(default=30.0, gt=0.0)

    @property
    def forecast_path(self) -> str:
        return f"/v1/rest/datastore/{self.dataset_id}"


class ServerConfig(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: tuple[str, ...] = ("*",)


class GatewayConfig(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    environment: str = "development"
    api_key: str | None = Field(default=None, repr=False)
    upstream: UpstreamConfig = UpstreamConfig()
    server: ServerConfig = ServerConfig()

    def safe_summary(self) -> dict:
        """Return a config summary safe for printing (no credentials)."""
        return {
            "environment": self.environment,
            "api_key_configured": bool(self.api_key),
            "upstream_base_url": self.upstream.base_url,
            "dataset_id": self.upstream.dataset_id,
            "timeout_seconds": self.upstream.timeout_seconds,
            "host": self.server.host,
            "port": self.server.port,
            "cors_origins": list(self.server.cors_origins),
        }
