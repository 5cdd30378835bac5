from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

PACKAGE_ROOT = Path(__file__).resolve().parent


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Minerva CMS"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./minerva.db"
    create_tables: bool = True

    # Security settings
    secret_key: str = "change-me-in-production"

    # Views and libraries (paths under app_root)
    app_root: Path = PACKAGE_ROOT
    default_layout: str = "default"
    libraries_config_file: Path = Path("data/libraries_config.json")

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = True
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
