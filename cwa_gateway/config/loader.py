"""YAML config loader with environment variable overrides."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cwa_gateway.config.schema import GatewayConfig
from cwa_gateway.errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_API_KEY = "CWA_API_KEY"
ENV_PORT = "PORT"
ENV_ENVIRONMENT = "APP_ENV"


def load_config(
    path: str | Path | None = None, environ: dict[str, str] | None = None
) -> GatewayConfig:
    """Load and validate config from an optional YAML file plus the environment.

    A missing file yields the defaults. CWA_API_KEY, PORT and APP_ENV take
    precedence over values from the file.
    """
    if environ is None:
        environ = dict(os.environ)

    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
            if not isinstance(raw, dict):
                raise ConfigurationError(f"Config file {path} must contain a mapping")
        else:
            logger.info("Config file %s not found, using defaults", path)

    _apply_env_overrides(raw, environ)

    try:
        return GatewayConfig(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _apply_env_overrides(raw: dict[str, Any], environ: dict[str, str]) -> None:
    api_key = environ.get(ENV_API_KEY, "").strip()
    if api_key:
        raw["api_key"] = api_key

    port = environ.get(ENV_PORT, "").strip()
    if port:
        try:
            port_value = int(port)
        except ValueError as e:
            raise ConfigurationError(f"{ENV_PORT} must be an integer, got {port!r}") from e
        raw["server"] = {**(raw.get("server") or {}), "port": port_value}

    environment = environ.get(ENV_ENVIRONMENT, "").strip()
    if environment:
        raw["environment"] = environment
