"""Yo! Payments gateway."""

from paygate.gateways.yo.config import YoConfig
from paygate.gateways.yo.gateway import YoGateway

__all__ = ["YoConfig", "YoGateway"]
