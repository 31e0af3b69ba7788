"""Centralized configuration: every env var is read here."""

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_BASE_URL = "http://20.244.56.144/evaluation-service"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.port: int = int(os.getenv("PORT", "3000"))
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Remote analytics API
        self.api_base_url: str = os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
        self.api_key: str | None = os.getenv("API_KEY")
        self.api_timeout_seconds: float = float(os.getenv("API_TIMEOUT_SECONDS", "10"))

        # Cache store. No REDIS_URL means the in-process TTL cache.
        self.redis_url: str | None = os.getenv("REDIS_URL")
        self.cache_ttl_seconds: int = int(os.getenv("CACHE_TTL_SECONDS", "3600"))

        # Background refresh
        self.scheduler_enabled: bool = _env_bool("SCHEDULER_ENABLED", True)
        self.refresh_minute: int = int(os.getenv("REFRESH_MINUTE", "0"))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of missing required env vars."""
        required = ["API_KEY"]
        return [var for var in required if not getattr(self, var.lower())]


settings = Settings()
