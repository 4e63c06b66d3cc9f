"""
Configuration module for Pastebin.
Loads environment variables and provides config objects.
"""
import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.STORAGE_MODE: Optional[str] = _optional("STORAGE_MODE")
        self.REDIS_URL: Optional[str] = _optional("REDIS_URL")
        self.REDIS_TOKEN: Optional[str] = _optional("REDIS_TOKEN")
        self.DATA_DIR: str = os.getenv("DATA_DIR", os.path.join("data", "pastes"))
        self.DEBUG: bool = _flag("DEBUG", "False")
        self.APP_DOMAIN: str = os.getenv("APP_DOMAIN", "http://localhost:8000")

    @property
    def has_redis_credentials(self) -> bool:
        """Both the URL and the token are needed to reach Redis."""
        return bool(self.REDIS_URL and self.REDIS_TOKEN)


settings = Settings()
