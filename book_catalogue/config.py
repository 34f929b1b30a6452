"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``CATALOGUE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CATALOGUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Book Catalogue API"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Data files
    data_dir: Path = Path("data")
    books_file: str = "books.json"
    reviews_file: str = "reviews.json"

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logging")
    access_log_file: str = "log.txt"

    # Basic auth for the write endpoints
    auth_username: str = "medhat"
    auth_password: str = "Hero97"
    auth_realm: str = "Restricted Area"

    @property
    def books_path(self) -> Path:
        return self.data_dir / self.books_file

    @property
    def reviews_path(self) -> Path:
        return self.data_dir / self.reviews_file

    @property
    def access_log_path(self) -> Path:
        return self.log_dir / self.access_log_file


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
