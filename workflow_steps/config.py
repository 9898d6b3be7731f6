"""Application configuration using Pydantic Settings."""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "n8n Workflow Steps Analyzer"
    debug: bool = False

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = True

    # CORS for the marketplace frontend
    cors_origins: list[str] = ["*"]

    # ==========================================================================
    # ANALYZER LIMITS
    # Passed into the analyzer per request; the analyzer itself never reads
    # settings.
    # ==========================================================================

    # Traversal is capped at factor * node_count iterations
    max_iteration_factor: int = 3

    # Documents larger than this are rejected before parsing
    max_document_bytes: int = 5 * 1024 * 1024

    def analyzer_options(self) -> dict:
        """Keyword arguments forwarded to analyze_workflow()."""
        return {"max_iteration_factor": self.max_iteration_factor}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
