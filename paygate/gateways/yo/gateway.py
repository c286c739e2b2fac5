"""Yo! Payments gateway adapter.

Yo! is the primary gateway and supports every operation, including
disbursements and balance queries.
Documentation: https://www.yo.co.ug/payments/
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
    WebhookPayload,
    WebhookType,
    WithdrawRequest,
)
from paygate.gateways.yo.client import YoApiClient
from paygate.gateways.yo.codec import YoResponse
from paygate.gateways.yo.config import YoConfig
from paygate.gateways.yo.status import to_transaction_result
from paygate.gateways.yo.webhooks import (
    YoWebhookVerifier,
    is_failure_payload,
    is_ipn_payload,
)
from paygate.utils.phone import mask_phone, to_international

logger = logging.getLogger(__name__)


def _amount(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class YoGateway(PaymentGateway):
    """Yo! Payments gateway implementation."""

    def __init__(
        self,
        config: YoConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or YoConfig.from_settings()
        self.client = YoApiClient(self.config, transport=transport)
        self.verifier = YoWebhookVerifier(self.config.public_key_path)

    @property
    def gateway_config(self) -> GatewayConfig:
        return GatewayConfig(
            name=GatewayName.YO,
            enabled=self.config.enabled,
            use_sandbox=self.config.use_sandbox,
        )

    def get_provider_name(self) -> GatewayName:
        return GatewayName.YO

    def _result(
        self,
        response: YoResponse,
        external_reference: str | None = None,
    ) -> TransactionResult:
        return to_transaction_result(
            response,
            external_reference=external_reference,
            default_currency=self.config.currency,
        )

    async def deposit(self, request: DepositRequest) -> TransactionResult:
        phone_number = to_international(request.phone_number)
        logger.info(
            f"Yo! deposit {request.external_reference} "
            f"amount={request.amount} account={mask_phone(phone_number)}"
        )

        response = await self.client.deposit_funds(
            amount=request.amount,
            account=phone_number,
            narrative=request.narrative,
            external_reference=request.external_reference,
            instant_notification_url=request.success_callback_url,
            failure_notification_url=request.failure_callback_url,
        )
        return self._result(response, request.external_reference)

    async def withdraw(self, request: WithdrawRequest) -> TransactionResult:
        phone_number = to_international(request.phone_number)
        logger.info(
            f"Yo! withdraw {request.external_reference} "
            f"amount={request.amount} account={mask_phone(phone_number)}"
        )

        response = await self.client.withdraw_funds(
            amount=request.amount,
            account=phone_number,
            narrative=request.narrative,
            external_reference=request.external_reference,
        )
        return self._result(response, request.external_reference)

    async def check_status(self, reference: str) -> TransactionResult:
        response = await self.client.check_transaction_status(reference)
        return self._result(response)

    async def check_status_by_external_reference(
        self,
        external_reference: str,
    ) -> TransactionResult:
        response = await self.client.check_transaction_status_by_external_reference(
            external_reference
        )
        return self._result(response, external_reference)

    async def get_balance(self) -> list[BalanceResult]:
        response = await self.client.get_account_balance()
        return response.balances

    def verify_webhook(
        self,
        payload: dict[str, Any],
        signature: str | None = None,
    ) -> bool:
        """Verify a Yo! notification.

        Yo! embeds the signature in the payload, so ``signature`` is unused.
        """
        if is_ipn_payload(payload):
            return self.verifier.verify_ipn(payload)
        if is_failure_payload(payload):
            return self.verifier.verify_failure(payload)

        logger.warning(f"Unknown Yo! webhook payload format: {sorted(payload)}")
        return False

    def parse_webhook(self, payload: dict[str, Any]) -> WebhookPayload:
        if is_ipn_payload(payload):
            return WebhookPayload(
                type=WebhookType.SUCCESS,
                external_reference=payload.get("external_ref"),
                mno_reference=payload.get("network_ref"),
                amount=_amount(payload.get("amount")),
                phone_number=payload.get("msisdn"),
                timestamp=payload.get("date_time"),
                raw=payload,
            )

        if is_failure_payload(payload):
            return WebhookPayload(
                type=WebhookType.FAILURE,
                external_reference=payload.get("failed_transaction_reference"),
                timestamp=payload.get("transaction_init_date"),
                raw=payload,
            )

        return WebhookPayload(type=WebhookType.FAILURE, raw=payload)
