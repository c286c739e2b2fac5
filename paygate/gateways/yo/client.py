"""Yo! Payments API client.

Low-level async HTTP client for the Yo! XML API. One POST per call; the whole
exchange shares a single deadline of the configured timeout. No retries.
"""

import asyncio
import logging
from typing import Any

import httpx

from paygate.core.exceptions import TransportError
from paygate.gateways.yo.codec import YoResponse, build_request, parse_response
from paygate.gateways.yo.config import YoConfig

logger = logging.getLogger(__name__)

HEADERS = {
    "Content-Type": "text/xml",
    "Content-transfer-encoding": "text",
}


class YoApiClient:
    """Yo! API client."""

    def __init__(
        self,
        config: YoConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def _request(self, method: str, params: dict[str, Any] | None = None) -> YoResponse:
        body = build_request(
            api_username=self.config.api_username,
            api_password=self.config.api_password,
            method=method,
            params=params,
        )

        try:
            # httpx timeouts are per phase; a slow drip of bytes resets them
            async with asyncio.timeout(self.config.timeout_seconds):
                async with httpx.AsyncClient(transport=self._transport) as client:
                    response = await client.post(
                        self.config.api_url,
                        content=body.encode("utf-8"),
                        headers=HEADERS,
                        timeout=self.config.timeout_seconds,
                    )
        except (httpx.TimeoutException, TimeoutError) as e:
            logger.warning(f"Yo! {method} timed out after {self.config.timeout_seconds}s")
            raise TransportError("Yo! API request timeout", gateway="yo", code="TIMEOUT") from e
        except httpx.HTTPError as e:
            logger.warning(f"Yo! {method} request failed: {e}")
            raise TransportError(
                f"Yo! API request failed: {e}",
                gateway="yo",
                code="REQUEST_FAILED",
            ) from e

        if not response.is_success:
            raise TransportError(
                f"Yo! API HTTP error: {response.status_code} {response.reason_phrase}",
                gateway="yo",
                code="HTTP_ERROR",
                raw_response=response.text,
                http_status=response.status_code,
            )

        parsed = parse_response(response.text)

        if parsed.is_error:
            logger.info(f"Yo! {method} rejected: code={parsed.status_code} message={parsed.error_text}")
            raise TransportError(
                f"Yo! API error: {parsed.error_text}",
                gateway="yo",
                code="PROVIDER_ERROR",
                raw_response=parsed.raw,
                http_status=response.status_code,
                provider_code=parsed.status_code,
            )

        return parsed

    async def deposit_funds(
        self,
        amount: float,
        account: str,
        narrative: str,
        external_reference: str | None = None,
        provider_reference_text: str | None = None,
        instant_notification_url: str | None = None,
        failure_notification_url: str | None = None,
    ) -> YoResponse:
        """Initiate a deposit.

        Uses NonBlocking=TRUE so the call returns on acknowledgment and the
        outcome arrives by IPN.
        """
        return await self._request(
            "acdepositfunds",
            {
                "NonBlocking": True,
                "Amount": amount,
                "Account": account,
                "Narrative": narrative,
                "ExternalReference": external_reference,
                "ProviderReferenceText": provider_reference_text,
                "InstantNotificationUrl": instant_notification_url or self.config.ipn_url,
                "FailureNotificationUrl": failure_notification_url or self.config.failure_url,
            },
        )

    async def withdraw_funds(
        self,
        amount: float,
        account: str,
        narrative: str,
        external_reference: str | None = None,
        provider_reference_text: str | None = None,
        non_blocking: bool = False,
    ) -> YoResponse:
        """Initiate a withdrawal."""
        return await self._request(
            "acwithdrawfunds",
            {
                "Amount": amount,
                "Account": account,
                "Narrative": narrative,
                "ExternalReference": external_reference,
                "ProviderReferenceText": provider_reference_text,
                "NonBlocking": True if non_blocking else None,
            },
        )

    async def check_transaction_status(self, transaction_reference: str) -> YoResponse:
        """Check transaction status by Yo! reference."""
        return await self._request(
            "actransactioncheckstatus",
            {"TransactionReference": transaction_reference},
        )

    async def check_transaction_status_by_external_reference(
        self,
        external_reference: str,
    ) -> YoResponse:
        """Check transaction status by the caller's (private) reference."""
        return await self._request(
            "actransactioncheckstatus",
            {"PrivateTransactionReference": external_reference},
        )

    async def get_account_balance(self) -> YoResponse:
        return await self._request("acacctbalance")
