from __future__ import annotations

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Values that have shipped as defaults somewhere and must never sign tokens.
_PLACEHOLDER_SECRETS = {
    "fallback-secret-change-this",
    "change_me",
    "changeme",
    "secret",
    "jwt_secret",
}

_PLACEHOLDER_PASSWORDS = {
    "admin",
    "admin123",
    "password",
    "changeme",
    "change-me",
    "change-me-now",
}


class Settings(BaseSettings):
    """App settings loaded from environment variables (.env)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Insurance Form Portal"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # SERVER
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # SECURITY
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_SECONDS: int = 60 * 60 * 24 * 7  # 7d

    # CORS
    CORS_ALLOW_ORIGINS: str = "*"  # "*" or "https://a.com,https://b.com"
    CORS_ALLOW_CREDENTIALS: bool = False

    # DATABASE
    DATABASE_DSN: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # DEV BOOTSTRAP
    AUTO_CREATE_ADMIN: bool = False
    DEFAULT_ADMIN_EMAIL: str = "admin@example.com"
    DEFAULT_ADMIN_PASSWORD: str = ""
    DEFAULT_ADMIN_NAME: str = "Portal Admin"

    # SAMPLE DATA (for local testing)
    AUTO_SEED_SAMPLE: bool = False

    @field_validator("JWT_SECRET")
    @classmethod
    def _check_secret(cls, v: str) -> str:
        s = (v or "").strip()
        if s.lower() in _PLACEHOLDER_SECRETS:
            raise ValueError("JWT_SECRET is a known placeholder; configure a real secret")
        if len(s) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters")
        return s

    @model_validator(mode="after")
    def _check_admin_password(self) -> "Settings":
        if self.AUTO_CREATE_ADMIN:
            pw = self.DEFAULT_ADMIN_PASSWORD
            if pw.lower() in _PLACEHOLDER_PASSWORDS or len(pw) < 12:
                raise ValueError(
                    "DEFAULT_ADMIN_PASSWORD must be set to a non-placeholder value of at least 12 characters "
                    "when AUTO_CREATE_ADMIN is enabled"
                )
        return self

    def cors_origins(self) -> list[str]:
        s = (self.CORS_ALLOW_ORIGINS or "").strip()
        if not s or s == "*":
            return ["*"]
        return [x.strip() for x in s.split(",") if x.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_DSN.startswith("sqlite")


settings = Settings()
