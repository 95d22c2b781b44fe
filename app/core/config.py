"""Core configuration management using Pydantic settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator, field_validator
from typing import List


# Valid log levels
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Schwab OAuth application
    schwab_client_id: str
    schwab_client_secret: str
    schwab_redirect_uri: str
    schwab_base_url: str = "https://api.schwabapi.com"

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Calendar used for "today" when filtering expirations
    market_timezone: str = "America/New_York"

    # Logging
    log_level: str = "INFO"

    # Dashboard
    dashboard_symbols: str = "SPY,QQQ,DIA"  # Comma-separated list of tickers

    # Chain ranking
    strike_range: float = 20.0
    min_open_interest: int = 50
    expiry_window_days: int = 21
    max_results: int = 8
    fetch_window_days: int = 22  # Upstream date range, one day wider than the filter window

    # API Configuration
    backend_port: int = 8000

    # CORS Configuration
    cors_origins: str = "http://localhost:3000"  # Comma-separated list of allowed origins

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        upper_v = v.upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}")
        return upper_v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def dashboard_symbols_list(self) -> List[str]:
        """Parse dashboard symbols from comma-separated string to upper-cased list."""
        return [s.strip().upper() for s in self.dashboard_symbols.split(",") if s.strip()]

    @model_validator(mode='after')
    def validate_config(self) -> 'Settings':
        """Validate configuration after all fields are set."""
        if self.fetch_window_days < self.expiry_window_days:
            raise ValueError("fetch_window_days must cover expiry_window_days")
        if self.max_results < 1:
            raise ValueError("max_results must be at least 1")
        return self


# Global settings instance
settings = Settings()
