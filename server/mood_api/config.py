"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="MOODTRACK_", env_file=".env", extra="ignore")

    # Database path
    data_path: str = os.getenv("DATA_PATH", os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

    @property
    def mood_db_path(self) -> str:
        return os.path.join(self.data_path, "mood.db")

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8082

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Analysis
    analysis_window_days: int = 30

    # External narrative generator
    llm_api_key: Optional[str] = None
    llm_model: str = "llama3.1-8b"
    llm_api_url: str = "https://api.cerebras.ai/v1/chat/completions"
    llm_timeout_seconds: float = 20.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
