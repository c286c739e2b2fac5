"""Payment gateway adapters."""

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

__all__ = [
    "BalanceResult",
    "DepositRequest",
    "GatewayConfig",
    "GatewayName",
    "PaymentGateway",
    "TransactionResult",
    "TransactionStatus",
    "WebhookPayload",
    "WebhookType",
    "WithdrawRequest",
]
