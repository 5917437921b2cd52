"""Application configuration using pydantic-settings.

All values can be overridden through environment variables or a local
``.env`` file (e.g. ``STARGATE_API_URL``, ``ROUTE_CACHE_TTL``).
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Log level when debug is off")

    # ======================
    # Bridge Aggregator
    # ======================
    stargate_api_url: str = Field(
        default="https://stargate.finance/api/v1",
        description="Stargate bridge aggregator API base URL",
    )
    http_timeout: float = Field(
        default=10.0, gt=0, description="Per-request timeout in seconds (no retries)"
    )

    # ======================
    # Route Discovery
    # ======================
    route_cache_ttl: float = Field(
        default=300.0, gt=0, description="Route availability cache TTL in seconds"
    )
    probe_amount: str = Field(
        default="1000000000000000000",
        description="Probe quote amount in base units when token decimals are unknown",
    )
    probe_address: str = Field(
        default="0x0000000000000000000000000000000000000001",
        description="Placeholder sender/recipient used for probe quotes",
    )

    # ======================
    # Quoting
    # ======================
    default_slippage: float = Field(
        default=0.005, ge=0, lt=1, description="Default slippage tolerance (0.5%)"
    )
    default_quote_policy: str = Field(
        default="fastest", description="Default ranking policy (fastest or cheapest)"
    )

    def get_safe_dict(self) -> dict:
        """Return settings dict for diagnostics (nothing here is secret)."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "aggregator": {
                "url": self.stargate_api_url,
                "timeout": self.http_timeout,
            },
            "discovery": {
                "cache_ttl": self.route_cache_ttl,
                "probe_amount": self.probe_amount,
            },
            "quoting": {
                "slippage": self.default_slippage,
                "policy": self.default_quote_policy,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
