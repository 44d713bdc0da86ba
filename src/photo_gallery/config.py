"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_dir: Path = Path(".gallery-storage")
    storage_quota_bytes: int | None = 5 * 1024 * 1024
    comments_slot: str = "photo-gallery-comments"
    favorites_slot: str = "photo-gallery-favorites"
    legacy_comments_slot: str | None = "gallery-comments"
    legacy_favorites_slot: str | None = "gallery-favorites"
    max_open_galleries: int = 128
    mail_transport: Literal["resend", "smtp", "stub"] = "resend"
    mail_from_name: str = "Galerie Photo"
    resend_api_key: str | None = None
    resend_base_url: str = "https://api.resend.com"
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_secure: bool = False
    smtp_user: str | None = None
    smtp_password: str | None = None
    gmail_user: str | None = None
    gmail_app_password: str | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_quota(raw: int | None) -> int | None:
    """Normalize the storage quota; zero or negative disables it."""
    if raw is None or raw <= 0:
        return None
    return raw
