"""Configuration management using Pydantic settings."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI-compatible generation backend
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"

    # AI settings
    ai_model: str = "gpt-4o"
    ai_model_fast: str = "gpt-4o-mini"  # Used for website summaries
    draft_temperature: float = 0.8
    draft_max_tokens: int = 2500
    enrichment_temperature: float = 0.3
    enrichment_max_tokens: int = 400

    # Website enrichment
    fetch_timeout_seconds: float = 10.0
    fetch_user_agent: str = "Mozilla/5.0 (compatible; OutreachAssistant/1.0)"
    enrichment_max_chars: int = 5000
    analysis_max_chars: int = 8000
    rate_limit_requests_per_second: float = 2.0

    # Storage
    db_path: Path = Path("data/outreach.db")
    cache_ttl_days: int = 7

    # Overall time limit for enrichment + generation, None disables it
    generation_timeout_seconds: Optional[float] = 90.0


def get_settings() -> Settings:
    """Get application settings singleton."""
    return Settings()
