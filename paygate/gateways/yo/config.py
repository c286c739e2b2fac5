"""Yo! Payments gateway configuration."""

from dataclasses import dataclass

from paygate.config import Settings, get_settings
from paygate.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class YoConfig:
    api_username: str
    api_password: str
    production_url: str
    sandbox_url: str
    use_sandbox: bool = False
    enabled: bool = True
    currency: str = "UGX"
    timeout_seconds: float = 30.0
    ipn_url: str | None = None
    failure_url: str | None = None
    public_key_path: str | None = None

    @property
    def api_url(self) -> str:
        return self.sandbox_url if self.use_sandbox else self.production_url

    def __repr__(self) -> str:
        # Keep credentials out of logs and tracebacks
        return (
            f"YoConfig(api_url={self.api_url!r}, use_sandbox={self.use_sandbox}, "
            f"public_key_path={self.public_key_path!r})"
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "YoConfig":
        """Load and validate Yo! configuration.

        Raises:
            ConfigurationError: If API credentials or the active URL are missing
        """
        settings = settings or get_settings()

        missing = []
        if not settings.yo_api_username:
            missing.append("YO_API_USERNAME")
        if not settings.yo_api_password:
            missing.append("YO_API_PASSWORD")
        if settings.yo_use_sandbox and not settings.yo_sandbox_url:
            missing.append("YO_SANDBOX_URL")
        if not settings.yo_use_sandbox and not settings.yo_api_url:
            missing.append("YO_API_URL")

        if missing:
            raise ConfigurationError(
                f"Yo! gateway configuration missing: {', '.join(missing)}",
                gateway="yo",
            )

        return cls(
            api_username=settings.yo_api_username,
            api_password=settings.yo_api_password,
            production_url=settings.yo_api_url,
            sandbox_url=settings.yo_sandbox_url,
            use_sandbox=settings.yo_use_sandbox,
            enabled=settings.yo_enabled,
            currency=settings.yo_currency,
            timeout_seconds=settings.gateway_http_timeout_seconds,
            ipn_url=settings.yo_ipn_url,
            failure_url=settings.yo_failure_url,
            public_key_path=settings.yo_public_key_path,
        )
