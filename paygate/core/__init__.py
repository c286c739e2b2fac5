"""Core gateway exceptions."""

from paygate.core.exceptions import (
    ConfigurationError,
    GatewayError,
    InvalidRequestError,
    ProtocolError,
    TransportError,
    UnsupportedOperationError,
)

__all__ = [
    "ConfigurationError",
    "GatewayError",
    "InvalidRequestError",
    "ProtocolError",
    "TransportError",
    "UnsupportedOperationError",
]
