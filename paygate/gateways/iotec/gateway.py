"""IoTec payment gateway adapter.

IoTec is kept deposit-only: disbursements and balance queries are declared
unsupported and fail before any network call.
"""

import logging
from typing import Any

import httpx

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
from paygate.gateways.iotec.client import IoTecApiClient
from paygate.gateways.iotec.config import IoTecConfig
from paygate.utils.phone import mask_phone, to_national

logger = logging.getLogger(__name__)

IOTEC_STATUSES = {
    "success": TransactionStatus.SUCCEEDED,
    "failed": TransactionStatus.FAILED,
    "pending": TransactionStatus.PENDING,
}


def map_iotec_status(status: str | None) -> TransactionStatus:
    """Map an IoTec status literal to the normalized status."""
    return IOTEC_STATUSES.get((status or "").lower(), TransactionStatus.INDETERMINATE)


def _amount(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def map_collection_response(response: dict[str, Any]) -> TransactionResult:
    """Map an IoTec collection response to a TransactionResult."""
    return TransactionResult(
        status=map_iotec_status(response.get("status")),
        gateway_reference=response.get("id") or "",
        external_reference=response.get("externalId"),
        mno_reference=response.get("vendorTransactionId") or None,
        amount=_amount(response.get("amount")),
        currency=response.get("currency"),
        message=response.get("statusMessage"),
        raw_response=response,
    )


class IoTecGateway(PaymentGateway):
    """IoTec payment gateway implementation."""

    unsupported_operations = frozenset({"withdraw", "get_balance"})

    def __init__(
        self,
        config: IoTecConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or IoTecConfig.from_settings()
        self.client = IoTecApiClient(self.config, transport=transport)
        logger.info(f"IoTec gateway initialized (sandbox={self.config.use_sandbox})")

    @property
    def gateway_config(self) -> GatewayConfig:
        return GatewayConfig(
            name=GatewayName.IOTEC,
            enabled=self.config.enabled,
            use_sandbox=self.config.use_sandbox,
        )

    def get_provider_name(self) -> GatewayName:
        return GatewayName.IOTEC

    async def deposit(self, request: DepositRequest) -> TransactionResult:
        phone_number = to_national(request.phone_number)
        logger.info(
            f"IoTec deposit {request.external_reference} "
            f"amount={request.amount} payer={mask_phone(phone_number)}"
        )

        response = await self.client.initiate_collection(
            external_id=request.external_reference,
            payer=phone_number,
            amount=request.amount,
            payer_note=request.narrative,
            payee_note=request.narrative,
        )

        result = map_collection_response(response)
        result.external_reference = request.external_reference
        return result

    async def withdraw(self, request: WithdrawRequest) -> TransactionResult:
        raise self._unsupported("withdraw")

    async def check_status(self, reference: str) -> TransactionResult:
        response = await self.client.get_transaction_status(reference)
        if response is None:
            return TransactionResult(
                status=TransactionStatus.INDETERMINATE,
                gateway_reference=reference,
                message="Transaction not found",
            )
        return map_collection_response(response)

    async def check_status_by_external_reference(
        self,
        external_reference: str,
    ) -> TransactionResult:
        response = await self.client.get_transaction_by_external_id(external_reference)
        if response is None:
            return TransactionResult(
                status=TransactionStatus.INDETERMINATE,
                gateway_reference="",
                external_reference=external_reference,
                message="Transaction not found",
            )

        result = map_collection_response(response)
        result.external_reference = external_reference
        return result

    async def get_balance(self) -> list[BalanceResult]:
        raise self._unsupported("get_balance")

    def verify_webhook(
        self,
        payload: dict[str, Any],
        signature: str | None = None,
    ) -> bool:
        """Accept every IoTec webhook.

        IoTec does not sign its callbacks. The endpoint must be protected at
        the network level (IP allow-list or an unguessable path).
        """
        logger.debug("IoTec webhooks are unauthenticated; accepting payload")
        return True

    def parse_webhook(self, payload: dict[str, Any]) -> WebhookPayload:
        is_success = str(payload.get("status") or "").lower() == "success"
        return WebhookPayload(
            type=WebhookType.SUCCESS if is_success else WebhookType.FAILURE,
            external_reference=payload.get("externalId"),
            gateway_reference=payload.get("transactionId"),
            mno_reference=payload.get("vendorTransactionId"),
            amount=_amount(payload.get("amount")),
            phone_number=payload.get("payer"),
            timestamp=payload.get("processedAt"),
            raw=payload,
        )
