"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict

# ROI heuristic: expected CTR improvement per 10 recovered score points
DEFAULT_CTR_PER_10_POINTS = 0.02


class Settings(BaseSettings):
    """Report engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Redis / job queue
    redis_url: RedisDsn = "redis://localhost:6379/0"  # type: ignore[assignment]
    report_job_timeout: int = 600  # 10 minutes per render
    report_result_ttl: int = 60 * 60 * 24  # 1 day

    # Brand fallback used when a project carries no branding
    default_brand_name: str = "LLM Boost"
    default_brand_color: str = "#4f46e5"
    default_brand_url: str = "https://llmboost.com"

    # ROI heuristic override
    roi_ctr_per_10_points: float = DEFAULT_CTR_PER_10_POINTS

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test mode."""
        return self.env == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
