"""Configuration management using Pydantic Settings"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External Services
    transactions_api_base: str = "https://transaction.movasafe.com"
    transactions_api_token: Optional[str] = None
    transactions_fetch_limit: int = 10_000

    # Service
    service_name: str = "movasafe-analytics"
    log_level: str = "INFO"

    # Reporting
    reporting_timezone: str = "Africa/Kigali"
    default_currency: str = "RWF"

    # HTTP Client
    http_timeout_seconds: float = 10.0


settings = Settings()
