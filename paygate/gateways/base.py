"""Base payment gateway interface.

All gateway adapters must implement this interface.
Business logic should NOT live in adapters - only gateway communication.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from paygate.core.exceptions import UnsupportedOperationError


class GatewayName(str, Enum):
    """Supported payment gateways."""

    YO = "yo"
    IOTEC = "iotec"


class TransactionStatus(str, Enum):
    """Transaction status normalized across all gateways.

    INDETERMINATE means the provider response could not be classified;
    callers must follow up with a status check.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    INDETERMINATE = "indeterminate"


class WebhookType(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class DepositRequest(BaseModel):
    """Collection from a payer's mobile-money account."""

    external_reference: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    narrative: str
    success_callback_url: str | None = None
    failure_callback_url: str | None = None
    metadata: dict[str, str] | None = None


class WithdrawRequest(BaseModel):
    """Disbursement to a recipient's mobile-money account."""

    external_reference: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    narrative: str
    metadata: dict[str, str] | None = None


@dataclass
class TransactionResult:
    """Result of a gateway transaction operation.

    ``success`` is derived from ``status``: it is False only for FAILED.
    """

    status: TransactionStatus
    gateway_reference: str
    external_reference: str | None = None
    mno_reference: str | None = None
    amount: float | None = None
    currency: str | None = None
    message: str | None = None
    raw_response: Any = None
    success: bool = field(init=False)

    def __post_init__(self) -> None:
        self.success = self.status != TransactionStatus.FAILED


@dataclass
class BalanceResult:
    """Account balance in a single currency."""

    currency: str
    amount: float


@dataclass
class WebhookPayload:
    """Webhook (IPN) normalized across gateways."""

    type: WebhookType
    raw: Any
    external_reference: str | None = None
    gateway_reference: str | None = None
    mno_reference: str | None = None
    amount: float | None = None
    phone_number: str | None = None
    timestamp: str | None = None


@dataclass(frozen=True)
class GatewayConfig:
    """Identifies which gateway an adapter is bound to and its environment."""

    name: GatewayName
    enabled: bool
    use_sandbox: bool


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    # Optional capabilities this adapter does NOT offer
    unsupported_operations: frozenset[str] = frozenset()

    @property
    @abstractmethod
    def gateway_config(self) -> GatewayConfig:
        """Return the bound gateway configuration."""
        pass

    @abstractmethod
    def get_provider_name(self) -> GatewayName:
        """Return the gateway identifier."""
        pass

    def supports(self, operation: str) -> bool:
        """Whether this adapter offers ``operation``."""
        return operation not in self.unsupported_operations

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(operation, self.get_provider_name().value)

    @abstractmethod
    async def deposit(self, request: DepositRequest) -> TransactionResult:
        """Initiate a collection from a payer's mobile-money account.

        Args:
            request: Deposit details

        Returns:
            TransactionResult reflecting the provider's acknowledgment;
            final settlement may arrive later via webhook
        """
        pass

    @abstractmethod
    async def withdraw(self, request: WithdrawRequest) -> TransactionResult:
        """Initiate a disbursement to a mobile-money account.

        Raises:
            UnsupportedOperationError: If the gateway cannot disburse
        """
        pass

    @abstractmethod
    async def check_status(self, reference: str) -> TransactionResult:
        """Re-query a transaction by the gateway's own reference.

        A reference the provider does not know yields an INDETERMINATE
        result rather than an error.
        """
        pass

    @abstractmethod
    async def check_status_by_external_reference(
        self,
        external_reference: str,
    ) -> TransactionResult:
        """Re-query a transaction by the caller-assigned reference."""
        pass

    @abstractmethod
    async def get_balance(self) -> list[BalanceResult]:
        """Get the current account balance(s), possibly multi-currency.

        Raises:
            UnsupportedOperationError: If the gateway exposes no balance API
        """
        pass

    @abstractmethod
    def verify_webhook(
        self,
        payload: dict[str, Any],
        signature: str | None = None,
    ) -> bool:
        """Check that a webhook payload is authentic.

        Args:
            payload: Deserialized webhook body
            signature: Signature header, for gateways that send one

        Returns:
            bool: True if the payload is authentic
        """
        pass

    @abstractmethod
    def parse_webhook(self, payload: dict[str, Any]) -> WebhookPayload:
        """Normalize a webhook payload. Does not verify it."""
        pass
