from __future__ import annotations

import asyncio
import time

import httpx
import pytest
import xmltodict

from paygate.core.exceptions import ProtocolError, TransportError
from paygate.gateways.base import (
    BalanceResult,
    DepositRequest,
    GatewayName,
    TransactionStatus,
    WithdrawRequest,
)
from paygate.gateways.yo import YoGateway
from tests.conftest import YO_URL, RecordingTransport, response_head, yo_config, yo_xml


def _request_fields(request: httpx.Request) -> dict:
    return xmltodict.parse(request.content)["AutoCreate"]["Request"]


def _gateway(handler, **config) -> tuple[YoGateway, RecordingTransport]:
    transport = RecordingTransport(handler)
    return YoGateway(config=yo_config(**config), transport=transport), transport


def _deposit(**overrides) -> DepositRequest:
    values = {
        "external_reference": "PAY-1",
        "phone_number": "0770000000",
        "amount": 50000,
        "narrative": "Rent",
    }
    values.update(overrides)
    return DepositRequest(**values)


async def test_deposit_acknowledged_ok():
    def handler(request):
        return httpx.Response(
            200,
            text=yo_xml(Status="OK", StatusCode="0", TransactionReference="YO-REF-1"),
        )

    gateway, transport = _gateway(handler, ipn_url="https://app.test/ipn")

    result = await gateway.deposit(_deposit())

    assert result.success is True
    assert result.status == TransactionStatus.SUCCEEDED
    assert result.external_reference == "PAY-1"
    assert result.gateway_reference == "YO-REF-1"
    assert result.currency == "UGX"

    assert len(transport.requests) == 1
    sent = transport.requests[0]
    assert str(sent.url) == YO_URL
    assert sent.method == "POST"
    assert sent.headers["Content-Type"] == "text/xml"

    fields = _request_fields(sent)
    assert fields["Method"] == "acdepositfunds"
    assert fields["APIUsername"] == "yo-user"
    assert fields["NonBlocking"] == "TRUE"
    assert fields["Amount"] == "50000"
    assert fields["Account"] == "256770000000"
    assert fields["Narrative"] == "Rent"
    assert fields["ExternalReference"] == "PAY-1"
    assert fields["InstantNotificationUrl"] == "https://app.test/ipn"
    assert "FailureNotificationUrl" not in fields


async def test_deposit_callback_urls_override_config():
    def handler(request):
        return httpx.Response(200, text=yo_xml(Status="OK", StatusCode="1"))

    gateway, transport = _gateway(handler, ipn_url="https://app.test/ipn")

    result = await gateway.deposit(
        _deposit(
            success_callback_url="https://app.test/ok",
            failure_callback_url="https://app.test/fail",
        )
    )

    assert result.status == TransactionStatus.PENDING
    fields = _request_fields(transport.requests[0])
    assert fields["InstantNotificationUrl"] == "https://app.test/ok"
    assert fields["FailureNotificationUrl"] == "https://app.test/fail"


async def test_withdraw():
    def handler(request):
        return httpx.Response(
            200,
            text=yo_xml(
                Status="OK",
                StatusCode="0",
                TransactionStatus="PENDING",
                TransactionReference="YO-REF-2",
            ),
        )

    gateway, transport = _gateway(handler)

    result = await gateway.withdraw(
        WithdrawRequest(
            external_reference="WD-1",
            phone_number="+256 770 000 000",
            amount=20000,
            narrative="Payout",
        )
    )

    assert result.status == TransactionStatus.PENDING
    assert result.external_reference == "WD-1"
    fields = _request_fields(transport.requests[0])
    assert fields["Method"] == "acwithdrawfunds"
    assert fields["Account"] == "256770000000"
    assert "NonBlocking" not in fields


async def test_check_status():
    def handler(request):
        return httpx.Response(
            200,
            text=yo_xml(
                Status="OK",
                StatusCode="0",
                TransactionStatus="FAILED",
                TransactionReference="YO-REF-1",
                StatusMessage="Insufficient funds",
            ),
        )

    gateway, transport = _gateway(handler)

    result = await gateway.check_status("YO-REF-1")

    assert result.success is False
    assert result.status == TransactionStatus.FAILED
    assert result.message == "Insufficient funds"
    fields = _request_fields(transport.requests[0])
    assert fields["Method"] == "actransactioncheckstatus"
    assert fields["TransactionReference"] == "YO-REF-1"


async def test_check_status_by_external_reference():
    def handler(request):
        return httpx.Response(
            200,
            text=yo_xml(Status="OK", StatusCode="0", TransactionStatus="SUCCEEDED"),
        )

    gateway, transport = _gateway(handler)

    result = await gateway.check_status_by_external_reference("PAY-1")

    assert result.status == TransactionStatus.SUCCEEDED
    assert result.external_reference == "PAY-1"
    fields = _request_fields(transport.requests[0])
    assert fields["PrivateTransactionReference"] == "PAY-1"
    assert "TransactionReference" not in fields


async def test_get_balance():
    def handler(request):
        return httpx.Response(
            200,
            text=yo_xml(
                Status="OK",
                StatusCode="0",
                Balance="<Currency><Code>UGX</Code><Balance>150000</Balance></Currency>",
            ),
        )

    gateway, transport = _gateway(handler)

    assert await gateway.get_balance() == [BalanceResult(currency="UGX", amount=150000.0)]
    assert _request_fields(transport.requests[0])["Method"] == "acacctbalance"


async def test_sandbox_url_selected():
    gateway, transport = _gateway(
        lambda request: httpx.Response(200, text=yo_xml(Status="OK", StatusCode="0")),
        use_sandbox=True,
    )

    await gateway.check_status("YO-REF-1")

    assert str(transport.requests[0].url) == "https://sandbox.yo.test/task.php"
    assert gateway.gateway_config.use_sandbox is True
    assert gateway.gateway_config.name == GatewayName.YO


async def test_http_error():
    gateway, _ = _gateway(lambda request: httpx.Response(503, text="maintenance"))

    with pytest.raises(TransportError) as exc:
        await gateway.deposit(_deposit())

    assert exc.value.code == "HTTP_ERROR"
    assert exc.value.gateway == "yo"
    assert exc.value.http_status == 503
    assert exc.value.raw_response == "maintenance"
    assert exc.value.retryable is True


async def test_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    gateway, _ = _gateway(handler)

    with pytest.raises(TransportError) as exc:
        await gateway.check_status("YO-REF-1")

    assert exc.value.code == "TIMEOUT"
    assert exc.value.retryable is True


async def test_connection_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    gateway, _ = _gateway(handler)

    with pytest.raises(TransportError) as exc:
        await gateway.get_balance()

    assert exc.value.code == "REQUEST_FAILED"
    assert exc.value.retryable is False


async def test_provider_business_error():
    def handler(request):
        return httpx.Response(
            200,
            text=yo_xml(Status="ERROR", StatusCode="-22", ErrorMessage="Invalid account number"),
        )

    gateway, _ = _gateway(handler)

    with pytest.raises(TransportError) as exc:
        await gateway.deposit(_deposit())

    assert exc.value.code == "PROVIDER_ERROR"
    assert exc.value.provider_code == -22
    assert "Invalid account number" in str(exc.value)
    assert exc.value.raw_response["ErrorMessage"] == "Invalid account number"
    assert exc.value.retryable is False


async def test_unparseable_body():
    gateway, _ = _gateway(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(ProtocolError) as exc:
        await gateway.deposit(_deposit())

    assert exc.value.raw_response == "<html>oops</html>"


def test_supports_every_operation():
    gateway = YoGateway(config=yo_config())

    assert gateway.supports("withdraw")
    assert gateway.supports("get_balance")
    assert gateway.get_provider_name() == GatewayName.YO


def test_repr_hides_credentials():
    assert "yo-pass" not in repr(yo_config())


async def test_check_status_over_the_network(local_http_server):
    body = yo_xml(Status="OK", StatusCode="0", TransactionStatus="SUCCEEDED").encode()

    async def respond(path, writer):
        writer.write(response_head(len(body)) + body)

    base_url = await local_http_server(respond)
    gateway = YoGateway(config=yo_config(production_url=f"{base_url}/task.php", timeout_seconds=5.0))

    result = await gateway.check_status("YO-REF-1")

    assert result.status == TransactionStatus.SUCCEEDED


async def test_timeout_bounds_a_slowly_dripping_response(local_http_server):
    body = yo_xml(Status="OK", StatusCode="0").encode() + b" " * 40

    async def respond(path, writer):
        writer.write(response_head(len(body)))
        # Each chunk arrives well inside the per-read timeout
        for i in range(len(body)):
            writer.write(body[i : i + 1])
            await writer.drain()
            await asyncio.sleep(0.05)

    base_url = await local_http_server(respond)
    gateway = YoGateway(config=yo_config(production_url=f"{base_url}/task.php", timeout_seconds=0.5))

    started = time.monotonic()
    with pytest.raises(TransportError) as exc:
        await gateway.check_status("YO-REF-1")

    assert exc.value.code == "TIMEOUT"
    assert time.monotonic() - started < 2.0
