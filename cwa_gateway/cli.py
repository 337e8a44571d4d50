"""CLI entry point for the CWA forecast gateway."""

import argparse
import asyncio
import json
import logging

from cwa_gateway.api.handlers import map_error
from cwa_gateway.config.defaults import DEFAULT_CITIES
from cwa_gateway.config.loader import load_config
from cwa_gateway.config.schema import GatewayConfig
from cwa_gateway.errors import ConfigurationError
from cwa_gateway.ingest.city_resolver import resolve
from cwa_gateway.ingest.normalizer import WeatherNormalizer

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "ops/configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="cwa_gateway",
        description="CWA 36-hour forecast gateway for the six special municipalities",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Run the HTTP server")
    serve_p.add_argument("--host", default=None, help="Override bind host")
    serve_p.add_argument("--port", type=int, default=None, help="Override port")

    # fetch
    fetch_p = sub.add_parser("fetch", help="Fetch one normalized forecast")
    fetch_p.add_argument("city", choices=[c.key.value for c in DEFAULT_CITIES])

    # cities
    sub.add_parser("cities", help="List supported cities")

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1

    if args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "fetch":
        return _cmd_fetch(config, args)
    elif args.command == "cities":
        return _cmd_cities()
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_serve(config: GatewayConfig, args) -> int:
    import uvicorn

    from cwa_gateway.api.app import create_app

    host = args.host or config.server.host
    port = args.port or config.server.port
    logger.info("Server starting on %s:%d", host, port)
    logger.info("Environment: %s", config.environment)
    logger.info(
        "Supported cities: %s", ", ".join(c.locale_name for c in DEFAULT_CITIES)
    )
    uvicorn.run(create_app(config), host=host, port=port)
    return 0


def _cmd_fetch(config: GatewayConfig, args) -> int:
    normalizer = WeatherNormalizer(config)
    try:
        forecast = asyncio.run(normalizer.fetch_forecast(resolve(args.city)))
    except Exception as e:
        status, body = map_error(e)
        print(f"Error ({status}): {json.dumps(body, ensure_ascii=False)}")
        return 1
    print(json.dumps(forecast.to_dict(), ensure_ascii=False, indent=2))
    return 0


def _cmd_cities() -> int:
    for c in DEFAULT_CITIES:
        print(f"{c.key.value:<10} {c.locale_name}  /api/weather/{c.key.value}")
    return 0


def _cmd_config(config: GatewayConfig, args) -> int:
    if args.config_command == "show":
        print(json.dumps(config.safe_summary(), indent=2))
        return 0
    print("Use: config show")
    return 1
