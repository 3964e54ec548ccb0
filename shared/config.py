"""
Configuration module - Central access point for environment variables.

CRITICAL: Access ALL environment variables through this module.
NEVER use os.getenv() directly in application code.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_CORS_ORIGINS = ",".join(
    [
        "https://refereence.io",
        "https://stripe-m1l8.onrender.com",
        "https://iodized-delicate-jupiter.glitch.me",
        "http://localhost:3000",
        "http://localhost:3001",
        "http://localhost:5173",
        "http://127.0.0.1:5500",
    ]
)


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Stripe
    STRIPE_PUBLISHABLE_KEY: str = Field(
        default="",
        description="Publishable key handed to clients (pk_...)"
    )
    STRIPE_SECRET_KEY: str = Field(
        default="",
        description="Server-side secret key (must start with sk_)"
    )
    STRIPE_WEBHOOK_SECRET: str = Field(
        default="",
        description="Signing secret for webhook verification (whsec_...)"
    )
    STRIPE_API_VERSION: str = Field(default="2023-10-16")

    # HTTP server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)
    CORS_ORIGINS: str = Field(
        default=DEFAULT_CORS_ORIGINS,
        description="Comma-separated list of browser origins allowed to call the API"
    )
    MAX_BODY_BYTES: int = Field(
        default=10 * 1024 * 1024,
        description="Largest JSON body accepted on non-webhook routes"
    )

    # Payments
    SUPPORTED_CURRENCIES: str = Field(
        default="usd,eur,gbp,mxn",
        description="Comma-separated ISO currency codes accepted for payment intents"
    )
    CUSTOMER_STRATEGY: str = Field(
        default="create",
        description="How customers are resolved: 'create' or 'lookup_or_create'"
    )

    # Application Settings
    ENVIRONMENT: str = Field(
        default="production",
        description="'development' exposes error details in 500 responses"
    )
    LOG_LEVEL: str = Field(default="INFO")
    LOG_BODY_FIELDS: str = Field(
        default="amount,currency,payment_method_types,request_three_d_secure",
        description="Request body fields that may be logged in clear text"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"
        frozen = True

    @property
    def cors_origins(self) -> tuple[str, ...]:
        return _split_csv(self.CORS_ORIGINS)

    @property
    def supported_currencies(self) -> tuple[str, ...]:
        return tuple(code.lower() for code in _split_csv(self.SUPPORTED_CURRENCIES))

    @property
    def log_body_fields(self) -> frozenset[str]:
        return frozenset(_split_csv(self.LOG_BODY_FIELDS))

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()
