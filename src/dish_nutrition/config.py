"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    nutrition_table_path: Path = _DATA_DIR / "nutrition_table.csv"
    synonyms_path: Path = _DATA_DIR / "ingredient_synonyms.json"
    conversions_path: Path = _DATA_DIR / "household_measurements.json"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    assisted_match_timeout_seconds: float = 10.0
    assisted_match_candidate_limit: int = 100
    default_serving_grams: float = 150.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def assisted_matching_enabled(self) -> bool:
        """Return True when an API key for the name matcher is configured."""
        return bool(self.openai_api_key and self.openai_api_key.strip())
