"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Required settings will raise validation errors if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="beatstore-backend", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")
    store_name: str = Field(default="ProdByMTR", description="Store name shown in emails and checkout")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3001, description="Server port")
    request_timeout_seconds: float = Field(default=25.0, description="Inbound request timeout in seconds")

    # CORS
    cors_origins: str = Field(
        default="https://matirodas50-eng.github.io,http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Frontend
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Storefront URL used for checkout redirects",
    )

    # Supabase
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_secret_key: str = Field(..., description="Supabase secret key for backend operations")
    orders_table: str = Field(default="orders", description="Table holding order records")
    orders_page_size: int = Field(default=50, ge=1, le=500, description="Max orders returned by the listing endpoint")

    # Stripe
    stripe_secret_key: str = Field(default="", description="Stripe secret API key")
    stripe_webhook_secret: str = Field(default="", description="Stripe webhook signing secret")
    currency: str = Field(default="usd", description="Checkout currency")
    checkout_session_ttl_seconds: int = Field(
        default=1800,
        ge=1800,
        le=86400,
        description="Checkout session lifetime (Stripe accepts 30 minutes to 24 hours)",
    )
    webhook_retry_unmatched: bool = Field(
        default=False,
        description="Answer unmatched completion events with 503 so Stripe redelivers them",
    )

    # Email (Resend)
    resend_api_key: str = Field(default="", description="Resend API key for sending emails")
    email_from_address: str = Field(
        default="ProdByMTR <ventas@prodbymtr.com>",
        description="From address for transactional emails",
    )
    operator_email: str = Field(default="matirodas50@gmail.com", description="Recipient of sale alerts")
    support_email: str = Field(default="matirodas50@gmail.com", description="Support contact shown to buyers")
    support_whatsapp: str = Field(default="+595983775018", description="Support WhatsApp shown to buyers")
    business_timezone: str = Field(default="America/Asuncion", description="Timezone for dates in emails")

    # Keep-alive
    keep_alive_enabled: bool = Field(default=True, description="Run the database keep-alive scheduler")
    keep_alive_interval_seconds: float = Field(
        default=240.0,
        gt=0,
        description="Seconds between keep-alive pings (below the host's idle-suspend window)",
    )
    keep_alive_monthly_budget: int = Field(default=10000, ge=1, description="Pings allowed per calendar month")
    keep_alive_budget_fraction: float = Field(
        default=0.9,
        gt=0,
        le=1,
        description="Fraction of the monthly budget after which pinging stops",
    )

    # Admin
    admin_jwt_secret: str = Field(default="", description="HS256 secret for admin bearer tokens")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_stripe_test_mode(self) -> bool:
        """Check if using Stripe test keys."""
        return self.stripe_secret_key.startswith("sk_test_")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
