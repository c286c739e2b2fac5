"""Yo! Payments XML codec.

Requests and responses share one envelope::

    <AutoCreate>
      <Request>
        <APIUsername/><APIPassword/><Method/> ...params
      </Request>
    </AutoCreate>

Responses carry ``AutoCreate/Response`` instead of ``Request``.
"""

from dataclasses import dataclass, field
from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict

from paygate.core.exceptions import ProtocolError
from paygate.gateways.base import BalanceResult

STATUS_OK = "OK"
STATUS_ERROR = "ERROR"
STATUS_CODE_SUCCESS = 0
STATUS_CODE_PENDING = 1


@dataclass
class YoResponse:
    """Parsed Yo! API response."""

    status: str
    status_code: int
    status_message: str | None = None
    error_message: str | None = None
    transaction_status: str | None = None
    transaction_reference: str | None = None
    mno_reference: str | None = None
    amount: float | None = None
    amount_formatted: str | None = None
    currency_code: str | None = None
    transaction_initiation_date: str | None = None
    transaction_completion_date: str | None = None
    issued_receipt_number: str | None = None
    balances: list[BalanceResult] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == STATUS_OK and self.status_code == STATUS_CODE_SUCCESS

    @property
    def is_pending(self) -> bool:
        return self.status_code == STATUS_CODE_PENDING

    @property
    def is_error(self) -> bool:
        return self.status == STATUS_ERROR or self.status_code < 0

    @property
    def error_text(self) -> str:
        return self.error_message or self.status_message or f"Error code: {self.status_code}"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_request(
    api_username: str,
    api_password: str,
    method: str,
    params: dict[str, Any] | None = None,
) -> str:
    """Build a Yo! XML request body.

    Parameters whose value is None or an empty string are omitted; the
    API rejects requests containing empty elements.
    """
    request: dict[str, str] = {
        "APIUsername": api_username,
        "APIPassword": api_password,
        "Method": method,
    }

    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        request[key] = _format_value(value)

    return xmltodict.unparse({"AutoCreate": {"Request": request}}, pretty=True)


def _text(node: dict[str, Any], key: str) -> str | None:
    value = node.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _to_int(value: str | None, default: int = -1) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value.replace(",", ""))
    except ValueError:
        return None


def _parse_balances(node: Any) -> list[BalanceResult]:
    if not isinstance(node, dict):
        return []

    balances = []
    for currency in node.get("Currency") or []:
        if not isinstance(currency, dict):
            continue
        code = _text(currency, "Code")
        amount = _to_float(_text(currency, "Balance"))
        if code is None or amount is None:
            continue
        balances.append(BalanceResult(currency=code, amount=amount))
    return balances


def parse_response(xml: str) -> YoResponse:
    """Parse a Yo! XML response body.

    Raises:
        ProtocolError: If the body is not XML or lacks AutoCreate/Response
    """
    try:
        # Currency repeats per wallet; always parse it as a list
        parsed = xmltodict.parse(xml.lstrip(), force_list=("Currency",))
    except ExpatError as e:
        raise ProtocolError(
            f"Failed to parse Yo! XML response: {e}",
            gateway="yo",
            raw_response=xml,
        ) from e

    envelope = parsed.get("AutoCreate") if isinstance(parsed, dict) else None
    response = envelope.get("Response") if isinstance(envelope, dict) else None
    if not isinstance(response, dict):
        raise ProtocolError(
            "Invalid Yo! response: missing AutoCreate.Response",
            gateway="yo",
            raw_response=xml,
        )

    return YoResponse(
        status=_text(response, "Status") or "UNKNOWN",
        status_code=_to_int(_text(response, "StatusCode")),
        status_message=_text(response, "StatusMessage"),
        error_message=_text(response, "ErrorMessage"),
        transaction_status=_text(response, "TransactionStatus"),
        transaction_reference=_text(response, "TransactionReference"),
        mno_reference=_text(response, "MNOTransactionReferenceId"),
        amount=_to_float(_text(response, "Amount")),
        amount_formatted=_text(response, "AmountFormatted"),
        currency_code=_text(response, "CurrencyCode"),
        transaction_initiation_date=_text(response, "TransactionInitiationDate"),
        transaction_completion_date=_text(response, "TransactionCompletionDate"),
        issued_receipt_number=_text(response, "IssuedReceiptNumber"),
        balances=_parse_balances(response.get("Balance")),
        raw=response,
    )
