"""Payment gateway service.

Resolves a gateway name to a cached adapter instance and routes operations
to it. No business logic here - only gateway coordination.
"""

import logging
from typing import Any

from paygate.config import get_settings
from paygate.core.exceptions import ConfigurationError
from paygate.gateways.base import (
    BalanceResult,
    DepositRequest,
    GatewayName,
    PaymentGateway,
    TransactionResult,
    WebhookPayload,
    WithdrawRequest,
)
from paygate.gateways.iotec import IoTecGateway
from paygate.gateways.yo import YoGateway

logger = logging.getLogger(__name__)

GATEWAY_CLASSES: dict[GatewayName, type[PaymentGateway]] = {
    GatewayName.YO: YoGateway,
    GatewayName.IOTEC: IoTecGateway,
}


def _is_production() -> bool:
    return get_settings().environment == "production"


def get_configured_gateway() -> GatewayName:
    """Get the configured default gateway name (PAYMENT_GATEWAY, default 'yo').

    Raises:
        ConfigurationError: If PAYMENT_GATEWAY names an unknown gateway
    """
    value = (get_settings().payment_gateway or "").strip().lower()
    if not value:
        return GatewayName.YO

    try:
        return GatewayName(value)
    except ValueError:
        raise ConfigurationError(
            f"Invalid PAYMENT_GATEWAY value: '{value}'. Must be 'yo' or 'iotec'.",
            gateway=value,
            code="INVALID_CONFIG",
        ) from None


def _resolve_name(name: str | GatewayName) -> GatewayName:
    if isinstance(name, GatewayName):
        return name
    try:
        return GatewayName(name.strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"Unknown gateway: {name}",
            gateway=name,
            code="UNKNOWN_GATEWAY",
        ) from None


class GatewayService:
    """Service for managing payment gateway adapters."""

    def __init__(self) -> None:
        self._gateways: dict[GatewayName, PaymentGateway] = {}

    def get_gateway(self, gateway_name: str | GatewayName | None = None) -> PaymentGateway:
        """Get or create a gateway instance.

        Construction validates credentials, so the first lookup of a
        misconfigured gateway raises ConfigurationError.
        """
        name = get_configured_gateway() if gateway_name is None else _resolve_name(gateway_name)

        gateway = self._gateways.get(name)
        if gateway is not None:
            return gateway

        if not getattr(get_settings(), f"{name.value}_enabled"):
            raise ConfigurationError(
                f"Gateway '{name.value}' is disabled",
                gateway=name.value,
                code="GATEWAY_DISABLED",
            )

        gateway = GATEWAY_CLASSES[name]()
        logger.info(
            f"Initialized {name.value} gateway "
            f"(sandbox={gateway.gateway_config.use_sandbox})"
        )
        self._gateways[name] = gateway
        return gateway

    def reset(self) -> None:
        """Drop cached gateways and settings; the next lookup re-validates."""
        self._gateways.clear()
        get_settings.cache_clear()

    def validate(self) -> PaymentGateway:
        """Validate the configured gateway eagerly, e.g. at startup.

        Raises:
            ConfigurationError: If the gateway cannot be built, or if Yo!
                webhook verification would run without a public key in
                production
        """
        name = get_configured_gateway()
        logger.info(f"Validating configuration for gateway: {name.value}")

        gateway = self.get_gateway(name)

        if isinstance(gateway, YoGateway) and not gateway.verifier.has_public_key:
            if _is_production():
                raise ConfigurationError(
                    "Yo! webhook public key is required in production (YO_PUBLIC_KEY_PATH)",
                    gateway=name.value,
                    code="MISSING_CONFIG",
                )
            logger.warning("Yo! webhook signatures will NOT be verified (no public key)")

        logger.info(f"Configuration valid. Active gateway: {gateway.get_provider_name().value}")
        return gateway

    async def deposit(
        self,
        request: DepositRequest,
        gateway_name: str | GatewayName | None = None,
    ) -> TransactionResult:
        """Initiate a deposit via the given or configured gateway."""
        return await self.get_gateway(gateway_name).deposit(request)

    async def withdraw(
        self,
        request: WithdrawRequest,
        gateway_name: str | GatewayName | None = None,
    ) -> TransactionResult:
        return await self.get_gateway(gateway_name).withdraw(request)

    async def check_status(
        self,
        reference: str,
        gateway_name: str | GatewayName | None = None,
    ) -> TransactionResult:
        return await self.get_gateway(gateway_name).check_status(reference)

    async def get_balance(
        self,
        gateway_name: str | GatewayName | None = None,
    ) -> list[BalanceResult]:
        return await self.get_gateway(gateway_name).get_balance()

    def verify_webhook(
        self,
        payload: dict[str, Any],
        signature: str | None = None,
        gateway_name: str | GatewayName | None = None,
    ) -> bool:
        """Verify webhook from gateway."""
        return self.get_gateway(gateway_name).verify_webhook(payload, signature)

    def parse_webhook(
        self,
        payload: dict[str, Any],
        gateway_name: str | GatewayName | None = None,
    ) -> WebhookPayload:
        return self.get_gateway(gateway_name).parse_webhook(payload)


# Singleton instance
gateway_service = GatewayService()


def get_payment_gateway() -> PaymentGateway:
    """Get the currently configured payment gateway."""
    return gateway_service.get_gateway()


def get_gateway_by_name(name: str | GatewayName) -> PaymentGateway:
    return gateway_service.get_gateway(name)


def validate_gateway_config() -> PaymentGateway:
    return gateway_service.validate()


def reset_gateway_instances() -> None:
    """Reset gateway instances (config reload, test isolation)."""
    gateway_service.reset()
