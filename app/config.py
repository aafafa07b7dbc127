"""Configuration settings for the DevShowcase API."""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_AVATAR_URL = (
    "https://cdn.vectorstock.com/i/500p/43/97/"
    "default-avatar-photo-placeholder-icon-grey-vector-38594397.jpg"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_env: str = "dev"

    # MongoDB configuration
    mongo_uri: str = "mongodb://mongo:27017"
    mongo_db: str = "devshowcase"

    # Auth configuration
    jwt_secret: str = "dev-secret"
    jwt_alg: str = "HS256"
    jwt_ttl_min: int = 720  # 12h default
    bcrypt_rounds: int = 10

    # Application configuration
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]
    default_avatar: str = DEFAULT_AVATAR_URL
    max_page_size: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Global settings instance
settings = Settings()
