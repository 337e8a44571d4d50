"""Gateway exception classes."""

from typing import Any


class GatewayError(Exception):
    """Base class for errors raised by the forecast gateway."""


class ConfigurationError(GatewayError):
    """Raised when configuration is invalid or a city key is not defined."""


class MissingCredentialError(GatewayError):
    """Raised when no CWA API key is configured."""


class UpstreamError(GatewayError):
    """Raised when the CWA API answers with a non-success status or is unreachable.

    ``body`` is the upstream error payload exactly as received (decoded JSON
    when possible, raw text otherwise, None when there was no response).
    """

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NotFoundError(GatewayError):
    """Raised when the upstream dataset has no record for the requested locale."""

    def __init__(self, locale_name: str):
        super().__init__(f"unable to fetch weather data for {locale_name}")
        self.locale_name = locale_name


class MalformedUpstreamDataError(GatewayError):
    """Raised when the upstream payload does not have the expected shape."""
