"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "payoff-engine"
    log_level: str = "INFO"

    # Simulation
    max_simulation_months: int = 1200  # safety bound, 100 years
    default_strategy: str = "avalanche"


settings = Settings()
