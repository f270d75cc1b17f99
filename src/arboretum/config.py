"""
Application configuration management.
"""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arboretum.llm.gemini_provider import DEFAULT_BASE_URL, DEFAULT_MODEL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        protected_namespaces=(),
    )

    # Gemini
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("API_KEY", "GEMINI_API_KEY", "api_key"),
    )
    model_name: str = DEFAULT_MODEL
    gemini_base_url: str = DEFAULT_BASE_URL
    temperature: float = 0.0
    request_timeout_seconds: float = 120.0

    # Visualizer
    viewport_width: int = 1280
    viewport_height: int = 800

    # Application
    log_level: str = "INFO"

    @field_validator("temperature")
    @classmethod
    def _temperature_in_range(cls, value: float) -> float:
        # Parses must be stable between requests.
        if not 0.0 <= value <= 0.2:
            raise ValueError("temperature must be between 0.0 and 0.2")
        return value

    @field_validator("api_key")
    @classmethod
    def _blank_key_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value.strip() if value else value

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)


# Global settings instance
settings = Settings()
