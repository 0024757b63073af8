"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "reverse-calc"
    log_level: str = "INFO"

    # Engine
    max_simulation_days: int = 500  # Safety cap for schedules that never pay off
    balance_discrepancy_tolerance: float = 0.01


settings = Settings()
