from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    env: str = "local"

    database_url: str = "sqlite:///./bookcart.db"
    local_store_url: str = "sqlite:///./bookcart_local.db"

    api_base_url: str = "http://localhost:8000"
    http_timeout: float = 10.0

    secret_key: str = "change-me"
    algorithm: str = "HS256"

    # Pricing
    base_currency: str = "USD"
    tax_rate: Decimal = Decimal("0.01")
    default_shipping_cost: Decimal = Decimal("9.99")
    default_min_delivery_days: int = 7
    default_max_delivery_days: int = 21

    # Exchange rates
    exchange_rate_url: str = "https://api.exchangerate-api.com/v4/latest/{base}"
    exchange_rate_fallback_url: str = "https://api.fixer.io/latest?base={base}"
    exchange_rate_ttl_seconds: int = 60 * 60

    # Local slots
    guest_cart_key: str = "guestCart"
    exchange_rate_cache_key: str = "exchange_rates_cache"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
