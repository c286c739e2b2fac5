"""Gateway configuration via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Payment gateway settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["development", "staging", "production"] = "development"

    # Gateway selection
    payment_gateway: str = "yo"
    gateway_http_timeout_seconds: float = 30.0

    # Yo! Payments
    yo_enabled: bool = True
    yo_api_username: Optional[str] = None
    yo_api_password: Optional[str] = None
    yo_api_url: str = "https://paymentsapi1.yo.co.ug/ybs/task.php"
    yo_sandbox_url: str = "https://sandbox.yo.co.ug/services/yopaymentsdev/task.php"
    yo_use_sandbox: bool = False
    yo_ipn_url: Optional[str] = None
    yo_failure_url: Optional[str] = None
    yo_public_key_path: Optional[str] = None
    yo_currency: str = "UGX"

    # IoTec
    iotec_enabled: bool = True
    iotec_client_id: Optional[str] = None
    iotec_client_secret: Optional[str] = None
    iotec_wallet_id: Optional[str] = None
    iotec_auth_url: str = "https://id.iotec.io/connect/token"
    iotec_base_url: str = "https://pay.iotec.io/api"
    iotec_sandbox_base_url: Optional[str] = None
    iotec_use_sandbox: bool = False
    iotec_currency: str = "UGX"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
