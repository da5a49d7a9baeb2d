"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # API
    app_name: str = "Opsboard Rule Engine"
    debug: bool = False

    # Rule snapshots
    rules_dir: str = "rules"

    # Evaluation defaults
    default_people_required: float = 1.0
    cache_max_size: int = 1024

    # Logging
    log_level: str = "info"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_prefix="OPSBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
