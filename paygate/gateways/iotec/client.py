"""IoTec Pay API client.

OAuth2 client-credentials authentication followed by bearer-authenticated
JSON calls. A fresh token is requested per operation, and the token
request and the API call share one deadline.
"""

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field, ValidationError

from paygate.core.exceptions import InvalidRequestError, ProtocolError, TransportError
from paygate.gateways.iotec.config import IoTecConfig

logger = logging.getLogger(__name__)

MINIMUM_COLLECTION_AMOUNT = 500


class CollectionRequest(BaseModel):
    """Fields a caller supplies for a mobile-money collection."""

    external_id: str = Field(..., min_length=1, serialization_alias="externalId")
    payer: str = Field(..., pattern=r"^[0-9]{10,12}$")
    amount: float = Field(..., ge=MINIMUM_COLLECTION_AMOUNT)
    payer_note: str = Field(..., min_length=1, serialization_alias="payerNote")
    payee_note: str = Field(..., min_length=1, serialization_alias="payeeNote")


class IoTecApiClient:
    """IoTec API client."""

    def __init__(
        self,
        config: IoTecConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def _call(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Fetch a token and make one API call under a single deadline."""
        try:
            # httpx timeouts are per phase; a slow drip of bytes resets them
            async with asyncio.timeout(self.config.timeout_seconds):
                async with httpx.AsyncClient(
                    transport=self._transport,
                    timeout=self.config.timeout_seconds,
                ) as client:
                    token = await self._access_token(client)
                    return await client.request(
                        method,
                        url,
                        headers={"Authorization": f"Bearer {token}"},
                        **kwargs,
                    )
        except (httpx.TimeoutException, TimeoutError) as e:
            logger.warning(f"IoTec {method} {url} timed out after {self.config.timeout_seconds}s")
            raise TransportError("IoTec API request timeout", gateway="iotec", code="TIMEOUT") from e
        except httpx.HTTPError as e:
            logger.warning(f"IoTec {method} {url} failed: {e}")
            raise TransportError(
                f"IoTec API request failed: {e}",
                gateway="iotec",
                code="REQUEST_FAILED",
            ) from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.is_success:
            return
        raise TransportError(
            f"Failed to {action}: {response.status_code} {response.reason_phrase}",
            gateway="iotec",
            code="HTTP_ERROR",
            raw_response=response.text,
            http_status=response.status_code,
        )

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolError(
                "Invalid IoTec response: body is not JSON",
                gateway="iotec",
                raw_response=response.text,
            ) from e
        if not isinstance(data, dict):
            raise ProtocolError(
                "Invalid IoTec response: expected a JSON object",
                gateway="iotec",
                raw_response=response.text,
            )
        return data

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        response = await client.post(
            self.config.auth_url,
            data={
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "grant_type": "client_credentials",
            },
        )
        self._raise_for_status(response, "get access token")

        token = self._json(response).get("access_token")
        if not token:
            raise ProtocolError(
                "Invalid IoTec token response: missing access_token",
                gateway="iotec",
                raw_response=response.text,
            )
        return token

    async def initiate_collection(
        self,
        external_id: str,
        payer: str,
        amount: float,
        payer_note: str,
        payee_note: str,
    ) -> dict[str, Any]:
        """Initiate a mobile-money collection.

        Raises:
            InvalidRequestError: If the request fails local validation; no
                network call is made in that case
        """
        try:
            request = CollectionRequest(
                external_id=external_id,
                payer=payer,
                amount=amount,
                payer_note=payer_note,
                payee_note=payee_note,
            )
        except ValidationError as e:
            messages = ", ".join(err["msg"] for err in e.errors())
            raise InvalidRequestError(f"Invalid request: {messages}", gateway="iotec") from e

        payload = {
            **request.model_dump(by_alias=True),
            "category": "MobileMoney",
            "currency": self.config.currency,
            "walletId": self.config.wallet_id,
            "transactionChargesCategory": "ChargeWallet",
        }

        response = await self._call("POST", f"{self.config.api_url}/collections/collect", json=payload)
        self._raise_for_status(response, "initiate collection")
        return self._json(response)

    async def _lookup(self, path: str, reference: str, action: str) -> dict[str, Any] | None:
        # References are caller-chosen; keep them a single path segment
        url = f"{self.config.api_url}{path}/{quote(reference, safe='')}"
        response = await self._call("GET", url)

        if response.status_code == 404:
            return None
        self._raise_for_status(response, action)
        return self._json(response)

    async def get_transaction_status(self, transaction_id: str) -> dict[str, Any] | None:
        """Get a collection by IoTec id. Returns None if not found."""
        return await self._lookup(
            "/collections/status",
            transaction_id,
            "get transaction status",
        )

    async def get_transaction_by_external_id(self, external_id: str) -> dict[str, Any] | None:
        """Get a collection by the caller's external id. Returns None if not found."""
        return await self._lookup(
            "/collections/external-id",
            external_id,
            "get transaction by external ID",
        )
