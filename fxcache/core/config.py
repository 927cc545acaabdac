from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_RATE_PROVIDERS = {"static", "external-http"}


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g. APP_NAME, DEBUG,
    EXCHANGE_RATE_ENDPOINT, EXCHANGE_RATE_API_KEY, RATES_CACHE_TTL_SECONDS).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    # Basic app metadata
    app_name: str = "Storefront Exchange Rates"
    debug: bool = False
    version: str = "0.1.0"
    log_json: bool = True

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 3600  # 1 hour
    exchange_rate_endpoint: str = "https://open.er-api.com/v6/latest/JPY"
    exchange_rate_api_key: Optional[str] = None
    http_timeout_seconds: float = 5.0
    http_retries: int = 1

    # Allowed: 'external-http' (remote lookup), 'static' (fallback table only)
    exchange_rate_provider: str = "external-http"

    @field_validator("exchange_rate_provider")
    @classmethod
    def known_provider(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ALLOWED_RATE_PROVIDERS:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{v}'. Allowed: {sorted(ALLOWED_RATE_PROVIDERS)}"
            )
        return v

    @field_validator("rates_cache_ttl_seconds")
    @classmethod
    def positive_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")
        return v

    @field_validator("http_timeout_seconds")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        return v

    @field_validator("http_retries")
    @classmethod
    def non_negative_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("http_retries cannot be negative")
        return v

    @field_validator("exchange_rate_endpoint")
    @classmethod
    def http_endpoint(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("exchange_rate_endpoint must be an http(s) URL")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
