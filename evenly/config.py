"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "evenly"
    log_level: str = "INFO"

    # Ledger
    person_id_prefix: str = "p"
    # Reject receipts whose item shares don't each sum to 1.0 (otherwise warn and store)
    require_complete_assignments: bool = False


settings = Settings()
