"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "PerpSignal Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"  # development, testnet, mainnet

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"

    # Redis
    redis_url: str = "redis://localhost:6379"
    signal_cache_ttl_seconds: int = 300

    # Signal runtime
    symbols: list[str] = ["BTC-PERP"]
    evaluation_interval_seconds: int = 60
    candle_limit: int = 250
    enable_runtime: bool = False

    # Decision policy: score_breakdown (default) or global_score (legacy thresholds)
    decision_policy: str = "score_breakdown"

    # Synthetic market data
    market_data_seed: int = 7

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
