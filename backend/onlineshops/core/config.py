"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]

DEFAULT_JWT_SECRET = "change-me"
DEFAULT_JWT_REFRESH_SECRET = "your-refresh-secret-key"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_NAME: str = "Online Shops API"
    ENV: str = "development"

    DATABASE_URL: str = "postgresql+psycopg://postgres@localhost:5432/onlineshops"

    JWT_SECRET: str = DEFAULT_JWT_SECRET
    # Must be overridden outside development; see validate_runtime_security.
    JWT_REFRESH_SECRET: str = DEFAULT_JWT_REFRESH_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "http://localhost:3000"
    ALLOWED_HOSTS: str = "*"

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_MAX_REQUESTS: int = 120
    RATE_LIMIT_AUTH_MAX_REQUESTS: int = 20
    # Comma-separated peer addresses allowed to set X-Forwarded-For.
    TRUSTED_PROXIES: str = ""

    TOKEN_CLEANUP_ENABLED: bool = True
    TOKEN_CLEANUP_INTERVAL_SECONDS: int = 60 * 60
    TOKEN_CLEANUP_STARTUP_DELAY_SECONDS: int = 30

    model_config = SettingsConfigDict(env_file=str(BASE_DIR / ".env"), env_file_encoding="utf-8")

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_hosts(self) -> list[str]:
        hosts = [host.strip() for host in self.ALLOWED_HOSTS.split(",") if host.strip()]
        return hosts or ["*"]

    @property
    def trusted_proxies(self) -> frozenset[str]:
        return frozenset(proxy.strip() for proxy in self.TRUSTED_PROXIES.split(",") if proxy.strip())

    @property
    def is_production(self) -> bool:
        return self.ENV.strip().lower() in {"production", "prod"}

    @property
    def access_token_ttl_seconds(self) -> int:
        return self.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    @property
    def refresh_token_ttl_seconds(self) -> int:
        return self.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60

    def validate_runtime_security(self) -> None:
        insecure = [
            name
            for name, value, default in (
                ("JWT_SECRET", self.JWT_SECRET, DEFAULT_JWT_SECRET),
                ("JWT_REFRESH_SECRET", self.JWT_REFRESH_SECRET, DEFAULT_JWT_REFRESH_SECRET),
            )
            if not value.strip() or value == default
        ]
        if self.JWT_SECRET == self.JWT_REFRESH_SECRET:
            insecure.append("JWT_REFRESH_SECRET (same as JWT_SECRET)")
        if not insecure:
            return
        if self.is_production:
            raise RuntimeError(f"Insecure signing secrets in production: {', '.join(insecure)}")
        logger.warning("Using insecure development signing secrets: %s", ", ".join(insecure))


settings = Settings()
