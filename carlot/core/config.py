# carlot/core/config.py
# - Reads env vars from ".env" (pydantic-settings).
# - Every value has a development default so the API boots with no .env at all.

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./carlot.db"

    # auth
    SECRET_KEY: str = "CHANGE_THIS_TO_RANDOM_SECRET"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # blob storage (local disk, served under /storage)
    STORAGE_DIR: Path = Path("./storage")
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    MAX_UPLOAD_SIZE: int = 20 * 1024 * 1024  # 20MB

    FRONTEND_URL: str | None = None
    LOG_LEVEL: str = "INFO"

    # dev only: create tables on startup instead of running Alembic
    RUN_CREATE_ALL: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
