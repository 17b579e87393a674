"""Application configuration from environment variables."""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All config comes from env vars or .env.filehost file."""

    model_config = SettingsConfigDict(
        env_file=".env.filehost",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Blobs live under <FILE_STORAGE_PATH>/<category subdir>
    FILE_STORAGE_PATH: str = "./uploads"
    # One JSON snapshot per category is kept in this directory
    SNAPSHOT_PATH: str = "."

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    @property
    def storage_root(self) -> Path:
        return Path(self.FILE_STORAGE_PATH)

    @property
    def snapshot_root(self) -> Path:
        return Path(self.SNAPSHOT_PATH)

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
