"""
Application configuration using Pydantic settings.
"""
from pathlib import Path

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage
    store_path: Path = Field(
        default=Path("tree_quote_store.json"),
        description="Location of the JSON file backing the key-value slots"
    )

    # Confirmation prompt shown before a quote is deleted
    delete_confirmation_message: str = Field(
        default="Delete this quote?",
        description="Prompt passed to the confirmation collaborator"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # Application Settings
    app_name: str = Field(
        default="Tree Cost Calc",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )

    class Config:
        env_file = ".env"
        env_prefix = "TREE_QUOTE_"
        case_sensitive = False


# Global settings instance
settings = Settings()
