"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.

Nested sections use a double underscore, e.g. ACCESS_TOKEN__SECRET.
"""

from functools import lru_cache
from typing import List

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class TokenSettings(BaseModel):
    """Signing secret and lifetime for one token kind."""

    secret: str
    expires_in_sec: int


class GithubAuthSettings(BaseModel):
    client_id: str
    client_secret: str


class GoogleAuthSettings(BaseModel):
    client_id: str
    client_secret: str
    redirect_uri: str


class StorageSettings(BaseModel):
    """Collection names in the document store."""

    collection_user: str = "users"
    collection_paper: str = "papers"
    collection_paper_content: str = "paper_contents"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    project_name: str = "paperdesk"

    # Tokens
    algorithm: str = "HS256"
    access_token: TokenSettings = TokenSettings(
        secret="change-this-access-secret-in-production",
        expires_in_sec=3600,  # 1 hour
    )
    refresh_token: TokenSettings = TokenSettings(
        secret="change-this-refresh-secret-in-production",
        expires_in_sec=2592000,  # 30 days
    )
    paper_token: TokenSettings = TokenSettings(
        secret="change-this-paper-secret-in-production",
        expires_in_sec=600,  # 10 minutes
    )

    # Identity providers
    github_auth: List[GithubAuthSettings] = []
    google_auth: List[GoogleAuthSettings] = []

    # Storage
    storage: StorageSettings = StorageSettings()
    paper_history_limit: int = 10


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
