from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from iex.exchange.wallex import DEFAULT_BASE_URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Wallex
    wallex_api_key: str = Field(default="", validation_alias="WALLEX_API_KEY")
    wallex_base_url: str = Field(default=DEFAULT_BASE_URL, validation_alias="WALLEX_BASE_URL")
    # Unset keeps the HTTP stack's own default.
    http_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        validation_alias="HTTP_TIMEOUT_SECONDS",
    )

    # CLI defaults
    symbol: str = Field(default="BTCUSDT", validation_alias="SYMBOL")
    asset: str = Field(default="USDT", validation_alias="ASSET")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def api_key_configured(self) -> bool:
        return bool(self.wallex_api_key.strip())
