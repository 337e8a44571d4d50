"""CWA forecast gateway — FastAPI app serving the six-city weather endpoints."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cwa_gateway.api.handlers import SERVER_FALLBACK_MESSAGE, handler_for
from cwa_gateway.config.defaults import DEFAULT_CITIES
from cwa_gateway.config.schema import GatewayConfig
from cwa_gateway.ingest.cwa_client import CwaClient
from cwa_gateway.ingest.normalizer import WeatherNormalizer
from cwa_gateway.models.common import utc_now_iso

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the CWA weather forecast API - six special municipalities"


def create_app(config: GatewayConfig, client: CwaClient | None = None) -> FastAPI:
    """Build the gateway app. The config is read once here and never mutated."""
    app = FastAPI(
        title="CWA Forecast Gateway", version="0.1.0", redirect_slashes=False
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.normalizer = WeatherNormalizer(config, client)
    # Route table: the only city keys that reach the weather handler.
    app.state.routes = {c.key.value: c for c in DEFAULT_CITIES}

    if not config.api_key:
        logger.warning("CWA_API_KEY is not set; weather endpoints will return 500")

    _register_routes(app)
    _register_error_handlers(app)
    return app


def _register_routes(app: FastAPI) -> None:
    # ── Service metadata ────────────────────────────────────────

    @app.get("/")
    async def index():
        endpoints = {c.label: f"/api/weather/{c.key}" for c in DEFAULT_CITIES}
        endpoints["health"] = "/api/health"
        return {
            "message": WELCOME_MESSAGE,
            "endpoints": endpoints,
            "cities": {c.label: c.locale_name for c in DEFAULT_CITIES},
        }

    @app.get("/api/health")
    @app.get("/api/health/", include_in_schema=False)
    async def health():
        return {"status": "OK", "timestamp": utc_now_iso()}

    # ── Weather ─────────────────────────────────────────────────

    # A trailing slash matches the same route rather than redirecting.
    @app.get("/api/weather/{city_key}")
    @app.get("/api/weather/{city_key}/", include_in_schema=False)
    async def city_weather(city_key: str, request: Request):
        city = request.app.state.routes.get(city_key)
        if city is None:
            raise StarletteHTTPException(status_code=404)
        handler = handler_for(city.key, request.app.state.normalizer)
        return await handler()


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        # Wrong method on a known path is answered like an unknown path.
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "path not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "server error", "message": str(exc) or SERVER_FALLBACK_MESSAGE},
        )
