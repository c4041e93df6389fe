"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./pennywise.db"

    # Service
    service_name: str = "pennywise"
    log_level: str = "INFO"

    # Billing cycles
    due_date_grace_days: int = Field(default=21, ge=0)  # Days between statement close and due date
    default_cycle_count: int = Field(default=6, ge=1)
    max_cycle_count: int = Field(default=36, ge=1)
    default_credit_withdraw_day: int = Field(default=15, ge=1, le=31)


settings = Settings()
