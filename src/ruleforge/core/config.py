"""RuleForge settings.

Values come from ``RULEFORGE_*`` environment variables or a ``.env`` file and
are validated once, when :func:`get_settings` is first called.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

Environment = Literal["development", "production", "testing"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Service, storage, logging and rule engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="RULEFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    app_name: str = "RuleForge"
    app_version: str = "0.1.0"
    environment: Environment = "development"
    debug: bool = False
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 5000
    workers: int = Field(default=1, ge=1)

    # Storage
    database_url: str = "sqlite+aiosqlite:///./rf_data/ruleforge.db"
    db_echo: bool = False
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging
    log_level: LogLevel = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Rule engine bounds
    max_rule_length: int = Field(
        default=4096,
        gt=0,
        description="Longest rule string accepted for parsing",
    )
    max_rule_depth: int = Field(
        default=64,
        gt=0,
        description="Deepest expression nesting accepted by the parser",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @model_validator(mode="after")
    def check_sqlite_workers(self) -> "Settings":
        """SQLite cannot be shared between worker processes."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes "
                f"(workers={self.workers}). Use a single worker or a PostgreSQL database_url."
            )
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return Settings()
