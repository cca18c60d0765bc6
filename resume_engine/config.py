"""
Configuration settings management with environment variable support.

Every setting can be overridden with a RESUME_ENGINE_-prefixed environment variable or a
.env file entry (e.g. RESUME_ENGINE_MAX_FILE_SIZE_MB=20).
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Import service settings."""

    log_level: str = Field(default="INFO", description="Root logging level")
    max_file_size_mb: float = Field(default=10, gt=0, description="Largest accepted upload")
    pdf_line_tolerance: float = Field(
        default=5.0, ge=0, description="Vertical distance (points) that starts a new PDF line"
    )
    review_confidence_threshold: float = Field(
        default=0.7, ge=0, le=1, description="Below this confidence an import needs review"
    )

    model_config = SettingsConfigDict(
        env_prefix="RESUME_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
