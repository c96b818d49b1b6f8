"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic import BaseModel
from pydantic_settings import BaseSettings


class WatchlistEntry(BaseModel):
    """Single (symbol, timeframe) pair watched by the signal generator."""

    symbol: str
    timeframe: str


DEFAULT_WATCHLIST = [
    WatchlistEntry(symbol="BTCUSDT", timeframe="1H"),
    WatchlistEntry(symbol="ETHUSDT", timeframe="1H"),
    WatchlistEntry(symbol="SOLUSDT", timeframe="4H"),
    WatchlistEntry(symbol="BNBUSDT", timeframe="4H"),
]


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Clon Trade Agent"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # SQLite (local persistence)
    sqlite_path: Optional[str] = None  # Defaults to ./data/clon.db

    # Redis
    redis_url: str = "redis://localhost:6379"
    ticker_cache_ttl: int = 5  # seconds
    candle_cache_ttl: int = 30  # seconds

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Market data providers
    binance_base_url: str = "https://api.binance.com/api/v3"
    bybit_base_url: str = "https://api.bybit.com/v5/market"
    candle_timeout_seconds: float = 8.0
    ticker_timeout_seconds: float = 5.0

    # Signal generation
    disclaimer_text: str = (
        "This analysis is for informational purposes only. "
        "Trade responsibly. Market conditions change rapidly."
    )
    signal_generation_cron: str = "0 8 * * *"  # consumed by the external scheduler
    watchlist: list[WatchlistEntry] = DEFAULT_WATCHLIST
    candle_limit: int = 300

    # Mentions
    bot_mention_handle: str = "@tradebot"

    # Support agent (Anthropic)
    anthropic_api_key: Optional[str] = None
    claude_model: str = "claude-sonnet-4-6"
    support_max_tokens: int = 1024
    support_history_limit: int = 20
    support_max_sessions: int = 1000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
