"""Base configuration settings."""
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings


class BaseSettings(PydanticBaseSettings):
    """Base settings shared by every relay entrypoint."""

    # Environment
    ENVIRONMENT: Literal["development", "test", "production"] = Field(
        default="development", description="Application environment"
    )
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )

    PROJECT_NAME: str = Field(default="Zoom Webhook Relay", description="Project name")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }
