"""Application configuration using environment-aware settings."""

from __future__ import annotations

import os
from pydantic_settings import BaseSettings

from cloud_uploader.core.errors import MissingConfigurationError


def _cloud_name_from_env() -> str | None:
    return os.environ.get("CLOUDINARY_CLOUD_NAME") or os.environ.get(
        "NEXT_PUBLIC_CLOUDINARY_CLOUD_NAME"
    )


class Settings(BaseSettings):
    """Runtime configuration pulled from environment variables."""

    db_url: str = os.environ.get("CU_DB_URL", "sqlite:///./cloud_uploader.db")
    cloudinary_cloud_name: str | None = _cloud_name_from_env()
    cloudinary_api_key: str | None = os.environ.get("CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = os.environ.get("CLOUDINARY_API_SECRET")
    auth_secret: str = os.environ.get("CU_AUTH_SECRET", "dev-secret-change-me")
    auth_max_age: int = int(os.environ.get("CU_AUTH_MAX_AGE", str(60 * 60 * 24 * 7)))
    log_level: str = os.environ.get("CU_LOG_LEVEL", "INFO")

    def cloudinary_credentials(self) -> dict[str, str]:
        """Return the Cloudinary credentials, failing if any of them is unset."""

        credentials = {
            "cloud_name": self.cloudinary_cloud_name,
            "api_key": self.cloudinary_api_key,
            "api_secret": self.cloudinary_api_secret,
        }
        missing = sorted(name for name, value in credentials.items() if not value)
        if missing:
            raise MissingConfigurationError(missing)
        return credentials


settings = Settings()
