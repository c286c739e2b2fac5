"""Gateway exceptions.

Every failure raised by this package is a ``GatewayError`` carrying the
provider name and a machine-readable ``code`` so callers can branch without
matching on message text.
"""

from typing import Any

# HTTP statuses worth a caller-level retry
RETRYABLE_HTTP_STATUSES = (408, 425, 429, 500, 502, 503, 504)


class GatewayError(Exception):
    """Base gateway exception."""

    default_code = "GATEWAY_ERROR"

    def __init__(
        self,
        message: str,
        gateway: str | None = None,
        code: str | None = None,
        raw_response: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.gateway = gateway
        self.code = code or self.default_code
        self.raw_response = raw_response

    def __str__(self) -> str:
        return self.message


class ConfigurationError(GatewayError):
    """Missing or invalid gateway configuration. Never retried."""

    default_code = "MISSING_CONFIG"


class UnsupportedOperationError(GatewayError):
    """Operation not offered by this provider."""

    default_code = "NOT_SUPPORTED"

    def __init__(self, operation: str, gateway: str) -> None:
        self.operation = operation
        super().__init__(
            f"Operation '{operation}' is not supported by {gateway} gateway",
            gateway=gateway,
        )


class InvalidRequestError(GatewayError):
    """Request rejected locally before reaching the provider."""

    default_code = "INVALID_REQUEST"


class ProtocolError(GatewayError):
    """Provider response body could not be parsed."""

    default_code = "PARSE_ERROR"


class TransportError(GatewayError):
    """HTTP failure, timeout, or provider-reported business error.

    ``code`` is one of ``HTTP_ERROR``, ``TIMEOUT``, ``PROVIDER_ERROR`` or
    ``REQUEST_FAILED``.
    """

    default_code = "REQUEST_FAILED"

    def __init__(
        self,
        message: str,
        gateway: str | None = None,
        code: str | None = None,
        raw_response: Any = None,
        http_status: int | None = None,
        provider_code: int | None = None,
    ) -> None:
        super().__init__(message, gateway=gateway, code=code, raw_response=raw_response)
        self.http_status = http_status
        self.provider_code = provider_code

    @property
    def retryable(self) -> bool:
        """Hint for the calling service; this layer never retries."""
        if self.code == "TIMEOUT":
            return True
        if self.code == "HTTP_ERROR":
            return self.http_status in RETRYABLE_HTTP_STATUSES
        return False
