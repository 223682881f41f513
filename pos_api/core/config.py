# pos_api/core/config.py

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Security
    SECRET_KEY: str
    ALGORITHM: Literal["HS256"] = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    JWT_ISSUER: str = "pos-api"
    JWT_AUDIENCE: str = "pos-clients"

    # Database
    DATABASE_URL: str
    DB_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://127.0.0.1:5500",
        "http://localhost:5500",
        "http://localhost:3000",
    ]

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "5/minute"
    SALE_RATE_LIMIT: str = "60/minute"

    # Sales
    INVOICE_PREFIX: str = "RCT-"
    CURRENCY_CODE: str = "KES"
    PAYMENT_RECONCILIATION_TOLERANCE: Decimal = Decimal("0.01")

    # Reporting
    PROFIT_FALLBACK_MARGIN: Decimal = Decimal("0.15")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
