# weatherflow/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    APP_NAME: str = "Weather Workflow Engine"
    APP_VERSION: str = "0.1.0"
    API_PREFIX: str = "/api/v1"

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Frontend origins allowed by CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3003"]

    # Database settings
    POSTGRES_HOST: str = "localhost"
    POSTGRES_USER: str = "workflow"
    POSTGRES_PASSWORD: str = "workflow"
    POSTGRES_DB: str = "workflow_db"
    POSTGRES_PORT: str = "5432"
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)
    SEED_SAMPLE_WORKFLOW: bool = True

    @field_validator("DATABASE_URL")
    def assemble_db_url(cls, v: Optional[str], info: ValidationInfo) -> str:
        """Build the asyncpg URL from the POSTGRES_* parts when not given directly"""
        if v and isinstance(v, str):
            return v
        values = info.data
        return "postgresql+asyncpg://{}:{}@{}:{}/{}".format(
            values.get("POSTGRES_USER", "workflow"),
            values.get("POSTGRES_PASSWORD", "workflow"),
            values.get("POSTGRES_HOST", "localhost"),
            values.get("POSTGRES_PORT", "5432"),
            values.get("POSTGRES_DB", "workflow_db"),
        )

    # Weather lookup
    WEATHER_API_URL: str = "https://api.open-meteo.com/v1/forecast"
    WEATHER_API_TIMEOUT: float = 10.0  # seconds

    # Execution settings
    MAX_STEPS: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_MAX_LEN: int = 0


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance"""
    return Settings()
