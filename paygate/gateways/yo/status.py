"""Map Yo! responses to normalized transaction results."""

from paygate.gateways.base import TransactionResult, TransactionStatus
from paygate.gateways.yo.codec import YoResponse

YO_TRANSACTION_STATUSES = {
    "SUCCEEDED": TransactionStatus.SUCCEEDED,
    "FAILED": TransactionStatus.FAILED,
    "PENDING": TransactionStatus.PENDING,
    "INDETERMINATE": TransactionStatus.INDETERMINATE,
}


def map_yo_status(response: YoResponse) -> TransactionStatus:
    """Resolve the canonical status of a Yo! response.

    Precedence: pending status code, then the TransactionStatus text,
    then the overall OK/0 sentinel. A response may be OK overall while the
    transaction itself is still pending, so the pending code wins.
    """
    if response.is_pending:
        return TransactionStatus.PENDING

    tx_status = (response.transaction_status or "").upper()
    if tx_status in YO_TRANSACTION_STATUSES:
        return YO_TRANSACTION_STATUSES[tx_status]

    if response.is_success:
        return TransactionStatus.SUCCEEDED

    return TransactionStatus.INDETERMINATE


def to_transaction_result(
    response: YoResponse,
    external_reference: str | None = None,
    default_currency: str = "UGX",
) -> TransactionResult:
    """Build a TransactionResult from a parsed Yo! response."""
    return TransactionResult(
        status=map_yo_status(response),
        gateway_reference=response.transaction_reference or "",
        external_reference=external_reference,
        mno_reference=response.mno_reference,
        amount=response.amount,
        currency=response.currency_code or default_currency,
        message=response.status_message
        or f"Status: {response.transaction_status or response.status}",
        raw_response=response.raw,
    )
