"""Configuration Management."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

MEGABYTE = 1024 * 1024


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="CL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Storage
    storage_key: str = Field(
        default="component-library.custom-components", min_length=1, description="Ledger key"
    )
    storage_dir: Path = Field(
        default=Path.home() / ".component-library", description="FileBackend directory"
    )

    # Quotas (binary megabytes)
    max_item_bytes: int = Field(default=1 * MEGABYTE, gt=0, description="Per-component cap")
    max_total_bytes: int = Field(default=10 * MEGABYTE, gt=0, description="Total ledger cap")
    near_capacity_ratio: float = Field(
        default=0.8, gt=0.0, le=1.0, description="Usage ratio that counts as nearly full"
    )

    # Validation
    max_json_depth: int = Field(default=32, gt=0, description="Max document nesting depth")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
