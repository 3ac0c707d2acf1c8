"""Configuration management for skreate."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Document
    title: str = "Skating Diagram"
    margin: int = 50

    # Labels
    label_offset: int = 100

    # Logging
    log_level: str = "INFO"

    class Config:
        env_prefix = "SKREATE_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
