"""
Image Tagger Backend — Application Configuration
==================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads environment variables (or a .env file),
       validates types/ranges, and exposes a singleton `settings` object.
Who:   Imported by every module that needs configuration values, including
       the Python client (API base URL, session file location).
When:  Loaded once at module import time; checked again during startup.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. State is held in process memory
    unless STORAGE_BACKEND=sql is combined with a file-backed DATABASE_URL.
    """

    # ── Storage ───────────────────────────────────────────────────────────
    # memory: dict-backed repositories (default)
    # sql:    SQLAlchemy async repositories on DATABASE_URL
    storage_backend: str = Field(default="memory")

    # Bare "sqlite+aiosqlite://" is an in-memory database shared through a
    # static pool, so the sql backend is also discarded on restart by default.
    database_url: str = Field(default="sqlite+aiosqlite://")

    # ── Access Guard ──────────────────────────────────────────────────────
    # Header carrying the acting user's name on protected requests
    auth_header: str = Field(default="X-User-Name")

    # ── Image Source ──────────────────────────────────────────────────────
    # Random photo ids are drawn from [0, image_source_max_id)
    image_source_base_url: str = Field(default="https://picsum.photos")
    image_source_max_id: int = Field(default=1000, ge=1, le=100_000)
    image_width: int = Field(default=800, ge=1, le=5000)
    image_height: int = Field(default=600, ge=1, le=5000)

    # When enabled, each generated URL is checked with a HEAD request
    image_source_verify: bool = Field(default=False)
    image_source_timeout: float = Field(default=5.0, gt=0, le=60)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list of allowed origins
    cors_origins: str = Field(default="http://localhost:3000,http://localhost:5173")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3001, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # ── Client ────────────────────────────────────────────────────────────
    client_api_base_url: str = Field(default="http://localhost:3001")
    client_session_path: str = Field(default="~/.image-tagger/session.json")
    client_timeout: float = Field(default=10.0, gt=0, le=120)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        """Ensures the storage backend is one we ship."""
        valid_backends = {"memory", "sql"}
        lower = v.lower()
        if lower not in valid_backends:
            raise ValueError(
                f"Invalid storage_backend '{v}'. Must be one of: {sorted(valid_backends)}"
            )
        return lower

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Checks settings that only make sense together.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if self.storage_backend == "sql" and not self.database_url:
            errors.append("DATABASE_URL must be set when STORAGE_BACKEND=sql")
        if not self.auth_header.strip():
            errors.append("AUTH_HEADER must name a request header")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
