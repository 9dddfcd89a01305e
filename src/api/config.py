import os
from typing import List


def _split_env_list(value: str) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item and item.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default) in {"1", "true", "True", "yes"}


class Settings:
    """Centralized application settings loaded from environment variables.

    This keeps security-sensitive values (like JWT secrets), storage
    credentials and cross-cutting config (like CORS) in one place.
    """

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./videotube.db")
    DB_AUTO_CREATE: bool = _env_flag("DB_AUTO_CREATE", "0")

    # JWT / Auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    JWT_ISSUER: str | None = os.getenv("JWT_ISSUER") or None
    JWT_AUDIENCE: str | None = os.getenv("JWT_AUDIENCE") or None

    # CORS
    # Comma-separated list, e.g. "http://localhost:3000,http://localhost:5173"
    _cors_origins_env: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://localhost:8000",
    )
    CORS_ORIGINS: List[str] = _split_env_list(_cors_origins_env)

    # Rate limiting (slowapi). Use "redis://host:6379/0" to share counters across workers.
    RATE_LIMIT_ENABLED: bool = _env_flag("RATE_LIMIT_ENABLED", "1")
    RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
    RATE_LIMIT_STORAGE_URI: str = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

    # Media storage (S3-compatible)
    MEDIA_BUCKET: str = os.getenv("MEDIA_BUCKET", "videotube-media")
    MEDIA_ENDPOINT_URL: str | None = os.getenv("MEDIA_ENDPOINT_URL") or None
    MEDIA_ACCESS_KEY: str | None = os.getenv("MEDIA_ACCESS_KEY") or None
    MEDIA_SECRET_KEY: str | None = os.getenv("MEDIA_SECRET_KEY") or None
    MEDIA_REGION: str = os.getenv("MEDIA_REGION", "us-east-1")
    MEDIA_PUBLIC_BASE_URL: str = os.getenv("MEDIA_PUBLIC_BASE_URL", "")


settings = Settings()
