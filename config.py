# config.py
from functools import lru_cache
from typing import Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API
    api_title: str = "Lead Scoring API"
    api_version: str = "0.2"
    log_level: str = "INFO"

    # AI provider selection: openai | gemini | mock
    ai_provider: str = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    ai_temperature: float = 0.3
    ai_max_tokens: int = 200

    # Intent thresholds on the combined 0-100 score
    high_threshold: int = 70
    medium_threshold: int = 40

    # Points awarded for the AI label
    ai_score_high: int = 50
    ai_score_medium: int = 30
    ai_score_low: int = 10

    # Pause between consecutive AI calls
    request_delay_seconds: float = 0.5

    # Uploads
    max_upload_bytes: int = 5 * 1024 * 1024

    @property
    def ai_score_table(self) -> Dict[str, int]:
        return {
            "High": self.ai_score_high,
            "Medium": self.ai_score_medium,
            "Low": self.ai_score_low,
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
