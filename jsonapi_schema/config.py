"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - The compiler core never reads settings; the shell passes values in
    - Every setting has a default: the service starts without a .env file
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from jsonapi_schema.core.domain_types import DEFAULT_SCHEMA_ID


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Resource model
    resource_model_path: str = "resource_model.json"

    # Document
    schema_id: str = DEFAULT_SCHEMA_ID

    @field_validator("schema_id")
    @classmethod
    def reject_blank_schema_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("schema_id must not be blank")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
