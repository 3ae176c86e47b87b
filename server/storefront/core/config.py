"""Application configuration loaded from environment variables."""
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central place for strongly typed application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Storefront Catalog Import")
    environment: Literal["development", "staging", "production"] = Field(default="development")
    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="sqlite:///./storefront.db", validation_alias="DATABASE_URL")

    max_upload_size_mb: int = Field(default=10)
    import_max_rows: int = Field(default=5000, ge=1)
    import_update_existing_default: bool = Field(default=True)
    import_missing_category_policy: Literal["skip", "fail"] = Field(
        default="skip",
        description="What to do with a row whose category disappeared between validation and commit",
    )

    @model_validator(mode="after")
    def convert_database_url(self) -> "Settings":
        """Convert postgresql+psycopg:// (psycopg3) to postgresql:// (psycopg2)."""
        if self.database_url.startswith("postgresql+psycopg://"):
            self.database_url = self.database_url.replace("postgresql+psycopg://", "postgresql://")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance so downstream code can import directly."""

    return Settings()
