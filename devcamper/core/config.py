import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

DEFAULT_JWT_SECRET = "change-me"
TOKEN_SOURCES = ("cookie", "header")


@dataclass(frozen=True, slots=True)
class TokenConfig:
    secret: str
    lifetime: timedelta
    algorithm: str = "HS256"


@dataclass(frozen=True, slots=True)
class ResetTokenConfig:
    window: timedelta = timedelta(minutes=10)
    num_bytes: int = 20


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.environment = os.getenv("ENVIRONMENT", "development").lower()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/devcamper.db")).resolve()
        self.api_prefix = os.getenv("API_PREFIX", "/api/v1").rstrip("/")
        self.jwt_secret = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
        self.jwt_expire_minutes = self._get_int("JWT_EXPIRE_MINUTES", default=60 * 24 * 30)
        self.jwt_cookie_expire_days = self._get_int("JWT_COOKIE_EXPIRE_DAYS", default=30)
        self.reset_token_expire_minutes = self._get_int("RESET_TOKEN_EXPIRE_MINUTES", default=10)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=10)
        self.token_sources = self._get_token_sources("TOKEN_SOURCES")
        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL", "")
        self.smtp_from_name = os.getenv("SMTP_FROM_NAME", "DevCamper")
        self.admin_default_email = os.getenv("ADMIN_EMAIL")
        self.admin_default_password = os.getenv("ADMIN_PASSWORD")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def token_config(self) -> TokenConfig:
        return TokenConfig(
            secret=self.jwt_secret,
            lifetime=timedelta(minutes=self.jwt_expire_minutes),
        )

    def reset_token_config(self) -> ResetTokenConfig:
        return ResetTokenConfig(window=timedelta(minutes=self.reset_token_expire_minutes))

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_token_sources(key: str) -> Tuple[str, ...]:
        value = os.getenv(key)
        if not value:
            return TOKEN_SOURCES
        sources = tuple(item.strip().lower() for item in value.split(",") if item.strip())
        unknown = [item for item in sources if item not in TOKEN_SOURCES]
        if unknown or not sources:
            raise RuntimeError(
                f"Environment variable {key} must list sources from {', '.join(TOKEN_SOURCES)}"
            )
        return sources
