"""
GameHub API — Application Configuration
========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Note:
    RAWG_API_KEY is deliberately optional here. The service starts without it
    and the upstream client fails on the first fetch instead.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults except the RAWG credential.
    Attributes are grouped by concern for readability.
    """

    # ── RAWG Upstream ─────────────────────────────────────────────────────
    # What: API key appended to every upstream request as ?key=...
    # How to obtain: https://rawg.io/apidocs
    rawg_api_key: str = Field(default="", description="RAWG API key")

    rawg_base_url: str = Field(default="https://api.rawg.io/api")

    # What: RAWG store ids used to filter collection queries
    # 1=Steam, 2=Xbox Store, 3=PlayStation Store, 5=GOG, 6=Nintendo, 11=Epic Games
    rawg_store_ids: str = Field(default="1,2,3,5,6,11")

    # What: Total deadline for a single upstream call, in seconds
    upstream_timeout: float = Field(default=10.0, gt=0, le=120)
    upstream_page_size: int = Field(default=20, ge=1, le=40)
    upstream_user_agent: str = Field(default="GameHub/1.0")

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    # What: Seconds uvicorn waits for in-flight requests after SIGTERM
    shutdown_grace_period: int = Field(default=5, ge=0, le=60)

    # What: Idle keep-alive timeout for inbound connections
    keepalive_timeout: int = Field(default=30, ge=1, le=300)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Request Policies ──────────────────────────────────────────────────
    # What: Single-slot per-IP limiter: one admitted request per interval
    rate_limit_interval: float = Field(default=1.0, ge=0)
    # What: Client entries idle for longer than this are purged
    rate_limit_idle_window: float = Field(default=60.0, gt=0)

    # Default: 10 MiB = 10 * 1024 * 1024
    max_body_size: int = Field(default=10_485_760, ge=1)
    max_query_length: int = Field(default=1024, ge=1)

    # ── Route Presets ─────────────────────────────────────────────────────
    # What: Length of the release-date window used by /games/upcoming
    upcoming_window_days: int = Field(default=365, ge=1, le=3650)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def store_filter(self) -> List[str]:
        """Splits the comma-separated store ids into a list."""
        return [s.strip() for s in self.rawg_store_ids.split(",") if s.strip()]

    @property
    def upstream_configured(self) -> bool:
        return bool(self.rawg_api_key)


# Singleton instance — imported throughout the application
settings = Settings()
