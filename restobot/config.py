# restobot/config.py
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=env_path, override=False)

BASE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    # App configuration from environment variables

    # Basic info
    APP_NAME: str = "Restobot API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # API Keys
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "")
    DEFAULT_MODEL: str = os.getenv("DEFAULT_MODEL_NAME", "gpt-4o-mini")

    # Paths
    BASE_DIR: Path = BASE_DIR
    STORAGE_DIR: Path = BASE_DIR / "storage"
    PROMPTS_DIR: Path = BASE_DIR / "core" / "prompts" / "templates"

    # Persistence: "json", "sql" or "memory"
    PERSISTENCE_BACKEND: str = "json"
    DATABASE_URL: str = ""

    # Offers are evaluated in this zone; empty means server local time
    TIMEZONE: str = ""

    # Processing
    FETCH_TIMEOUT_SECONDS: float = 20.0
    MAX_FILE_SIZE_MB: int = 10

    CORS_ORIGINS: list = ["*"]

    @property
    def restaurants_file(self) -> Path:
        return self.STORAGE_DIR / "restaurants.json"

    @property
    def backups_dir(self) -> Path:
        return self.STORAGE_DIR / "backups"

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL or f"sqlite:///{self.STORAGE_DIR / 'restaurants.db'}"


@lru_cache()
def get_settings() -> Settings:
    """Cache settings to avoid re-reading env file"""
    return Settings()
