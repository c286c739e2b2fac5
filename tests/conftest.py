from __future__ import annotations

import asyncio
import base64
import os

import httpx
import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from paygate.gateways.iotec import IoTecConfig
from paygate.gateways.yo import YoConfig
from paygate.services.gateway_service import reset_gateway_instances

YO_URL = "https://yo.test/ybs/task.php"
IOTEC_AUTH_URL = "https://id.iotec.test/connect/token"
IOTEC_BASE_URL = "https://pay.iotec.test/api"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Keep a developer's .env and shell exports out of the tests
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.upper().startswith(("YO_", "IOTEC_", "PAYMENT_GATEWAY", "ENVIRONMENT", "GATEWAY_")):
            monkeypatch.delenv(name, raising=False)
    reset_gateway_instances()
    yield
    reset_gateway_instances()


def set_yo_env(monkeypatch, **overrides):
    env = {
        "YO_API_USERNAME": "yo-user",
        "YO_API_PASSWORD": "yo-pass",
        "YO_API_URL": YO_URL,
    }
    env.update(overrides)
    for key, value in env.items():
        monkeypatch.setenv(key, value)


def set_iotec_env(monkeypatch, **overrides):
    env = {
        "IOTEC_CLIENT_ID": "client-123",
        "IOTEC_CLIENT_SECRET": "secret-123",
        "IOTEC_WALLET_ID": "wallet-123",
        "IOTEC_AUTH_URL": IOTEC_AUTH_URL,
        "IOTEC_BASE_URL": IOTEC_BASE_URL,
    }
    env.update(overrides)
    for key, value in env.items():
        monkeypatch.setenv(key, value)


def yo_config(**overrides) -> YoConfig:
    values = {
        "api_username": "yo-user",
        "api_password": "yo-pass",
        "production_url": YO_URL,
        "sandbox_url": "https://sandbox.yo.test/task.php",
    }
    values.update(overrides)
    return YoConfig(**values)


def iotec_config(**overrides) -> IoTecConfig:
    values = {
        "client_id": "client-123",
        "client_secret": "secret-123",
        "wallet_id": "wallet-123",
        "auth_url": IOTEC_AUTH_URL,
        "base_url": IOTEC_BASE_URL,
    }
    values.update(overrides)
    return IoTecConfig(**values)


def yo_xml(**fields) -> str:
    """Build a Yo! response document from flat fields."""
    body = "".join(f"<{key}>{value}</{key}>" for key, value in fields.items())
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<AutoCreate><Response>{body}</Response></AutoCreate>"
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def rsa_keys(tmp_path):
    """Generate an RSA key pair; returns (private_key, public_key_path)."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    path = tmp_path / "yo_public.pem"
    path.write_bytes(pem)
    return private_key, str(path)


def sign(private_key, data: str) -> str:
    signature = private_key.sign(data.encode("utf-8"), padding.PKCS1v15(), hashes.SHA1())
    return base64.b64encode(signature).decode("ascii")


def response_head(length: int, content_type: str = "text/xml") -> bytes:
    return (
        "HTTP/1.1 200 OK\r\n"
        f"Content-Type: {content_type}\r\n"
        f"Content-Length: {length}\r\n"
        "Connection: close\r\n"
        "\r\n"
    ).encode("ascii")


@pytest.fixture
async def local_http_server():
    """Start loopback HTTP servers driven by an async ``respond(path, writer)``.

    Returns a factory that starts a server and gives back its base URL.
    """
    servers = []
    tasks = []

    async def start(respond) -> str:
        async def handle(reader, writer):
            tasks.append(asyncio.current_task())
            try:
                request_line = await reader.readline()
                length = 0
                while (line := await reader.readline()) not in (b"\r\n", b""):
                    name, _, value = line.decode("latin-1").partition(":")
                    if name.strip().lower() == "content-length":
                        length = int(value)
                if length:
                    await reader.readexactly(length)
                await respond(request_line.split()[1].decode(), writer)
                await writer.drain()
            except (ConnectionError, asyncio.IncompleteReadError):
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        servers.append(server)
        host, port = server.sockets[0].getsockname()[:2]
        return f"http://{host}:{port}"

    yield start

    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    for server in servers:
        server.close()
