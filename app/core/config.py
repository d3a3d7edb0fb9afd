"""Application configuration."""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Order Text Extraction"

    # Catalog
    catalog_file: Optional[str] = None  # YAML catalog, bundled sample if unset

    # Parsing
    # Overrides the status words that disqualify "name 2" item lines
    bare_item_status_words: Optional[List[str]] = None

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
