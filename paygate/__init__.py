"""Mobile-money payment gateway layer.

Multi-gateway abstraction supporting Yo! Payments and IoTec::

    from paygate import DepositRequest, get_payment_gateway

    gateway = get_payment_gateway()
    result = await gateway.deposit(
        DepositRequest(
            external_reference="PAY-123",
            phone_number="256770000000",
            amount=50000,
            narrative="Rent payment",
        )
    )
"""

from paygate.core.exceptions import (
    ConfigurationError,
    GatewayError,
    InvalidRequestError,
    ProtocolError,
    TransportError,
    UnsupportedOperationError,
)
from paygate.gateways.base import (
    BalanceResult,
    DepositRequest,
    GatewayConfig,
    GatewayName,
    PaymentGateway,
    TransactionResult,
    TransactionStatus,
    WebhookPayload,
    WebhookType,
    WithdrawRequest,
)
from paygate.gateways.iotec import IoTecGateway
from paygate.gateways.yo import YoGateway
from paygate.services.gateway_service import (
    GatewayService,
    gateway_service,
    get_configured_gateway,
    get_gateway_by_name,
    get_payment_gateway,
    reset_gateway_instances,
    validate_gateway_config,
)

__all__ = [
    "BalanceResult",
    "ConfigurationError",
    "DepositRequest",
    "GatewayConfig",
    "GatewayError",
    "GatewayName",
    "GatewayService",
    "InvalidRequestError",
    "IoTecGateway",
    "PaymentGateway",
    "ProtocolError",
    "TransactionResult",
    "TransactionStatus",
    "TransportError",
    "UnsupportedOperationError",
    "WebhookPayload",
    "WebhookType",
    "WithdrawRequest",
    "YoGateway",
    "gateway_service",
    "get_configured_gateway",
    "get_gateway_by_name",
    "get_payment_gateway",
    "reset_gateway_instances",
    "validate_gateway_config",
]
