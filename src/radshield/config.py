"""
Configuration for radshield.

Values come from ``RADSHIELD_*`` environment variables or a ``.env`` file.
Model definitions live in the providers module and are re-exported here.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

from .providers import DEFAULT_MODEL, MODELS, list_models, list_providers


class Settings(BaseSettings):
    """Runtime configuration for the rewriting pipeline."""

    # Language model
    # Empty by default so redaction-only use needs no key; providers fall
    # back to their SDK environment variables.
    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    max_tokens: PositiveInt = 4000
    temperature: float = Field(0.0, ge=0.0, le=2.0)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["plain", "json"] = "plain"

    # Rewrites scoring below this are logged as warnings
    min_validation_score: int = Field(100, ge=0, le=100)

    model_config = SettingsConfigDict(
        env_prefix="RADSHIELD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = [
    "Settings",
    "get_settings",
    "MODELS",
    "DEFAULT_MODEL",
    "list_models",
    "list_providers",
]
