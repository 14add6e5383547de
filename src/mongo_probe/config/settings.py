"""Connection configuration via Pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT_DIR = Path(__file__).resolve().parents[3]
ENV_FILE = ROOT_DIR / ".env"

MONGO_SCHEMES = ("mongodb", "mongodb+srv")


class MongoSettings(BaseSettings):
    """Settings consumed by the client factory.

    Values come from the process environment only. The dotfile is applied to
    the environment beforehand by ``mongo_probe.config.dotenv_loader``.
    """

    mongodb_uri: str = Field(alias="MONGODB_URI")
    mongodb_user: str | None = Field(alias="MONGODB_USER", default=None)
    mongodb_password: str | None = Field(alias="MONGODB_PASSWORD", default=None)
    app_name: str = Field(alias="MONGODB_APP_NAME", default="mongo-probe")

    model_config = SettingsConfigDict(extra="ignore")

    @field_validator("mongodb_uri")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        value = value.strip()
        scheme = urlparse(value).scheme
        if scheme not in MONGO_SCHEMES:
            raise ValueError(f"MONGODB_URI must start with mongodb:// or mongodb+srv://, got scheme {scheme!r}")
        return value

    def snapshot(self) -> dict[str, Any]:
        """Return a sanitized dictionary of public settings."""
        return {
            "mongodb_uri": self.sanitize_uri(self.mongodb_uri),
            "mongodb_user": self.mongodb_user,
            "app_name": self.app_name,
        }

    @staticmethod
    def sanitize_uri(uri: str) -> str:
        """Remove credentials from connection URIs for public display."""
        parsed = urlparse(uri)
        netloc = parsed.netloc.split("@")[-1] if parsed.netloc else uri
        return f"{parsed.scheme}://{netloc}" if parsed.scheme else netloc


@lru_cache(maxsize=1)
def get_settings() -> MongoSettings:
    """Load settings once per process."""
    return MongoSettings()
