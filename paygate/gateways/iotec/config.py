"""IoTec gateway configuration."""

from dataclasses import dataclass

from paygate.config import Settings, get_settings
from paygate.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class IoTecConfig:
    client_id: str
    client_secret: str
    wallet_id: str
    auth_url: str
    base_url: str
    sandbox_base_url: str | None = None
    use_sandbox: bool = False
    enabled: bool = True
    currency: str = "UGX"
    timeout_seconds: float = 30.0

    @property
    def api_url(self) -> str:
        url = self.sandbox_base_url if self.use_sandbox else self.base_url
        return (url or "").rstrip("/")

    def __repr__(self) -> str:
        return (
            f"IoTecConfig(api_url={self.api_url!r}, "
            f"use_sandbox={self.use_sandbox})"
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "IoTecConfig":
        """Load and validate IoTec configuration.

        Raises:
            ConfigurationError: If credentials, wallet or the active URL are missing
        """
        settings = settings or get_settings()

        missing = []
        if not settings.iotec_client_id:
            missing.append("IOTEC_CLIENT_ID")
        if not settings.iotec_client_secret:
            missing.append("IOTEC_CLIENT_SECRET")
        if not settings.iotec_wallet_id:
            missing.append("IOTEC_WALLET_ID")
        if settings.iotec_use_sandbox and not settings.iotec_sandbox_base_url:
            missing.append("IOTEC_SANDBOX_BASE_URL")

        if missing:
            raise ConfigurationError(
                f"IoTec gateway configuration missing: {', '.join(missing)}",
                gateway="iotec",
            )

        return cls(
            client_id=settings.iotec_client_id,
            client_secret=settings.iotec_client_secret,
            wallet_id=settings.iotec_wallet_id,
            auth_url=settings.iotec_auth_url,
            base_url=settings.iotec_base_url,
            sandbox_base_url=settings.iotec_sandbox_base_url,
            use_sandbox=settings.iotec_use_sandbox,
            enabled=settings.iotec_enabled,
            currency=settings.iotec_currency,
            timeout_seconds=settings.gateway_http_timeout_seconds,
        )
