"""Application settings loaded from .env file."""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BUNDLED_STUB = Path(__file__).parent / "core" / "stubs" / "model.stub"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite:///database.sqlite"
    DB_CONNECTIONS: dict[str, str] = {}   # named connections: {"reporting": "postgresql+psycopg2://..."}
    MIGRATIONS_TABLE: str = "migrations"

    # Output
    BASE_PATH: str = "."
    MODELS_FOLDER: str = "app"
    MODELS_NAMESPACE: str = "App"
    MODEL_STUB_PATH: str = ""
    MODEL_FILE_EXTENSION: str = ".php"
    SINGULAR_CLASS_NAMES: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def stub_path(self) -> Path:
        return Path(self.MODEL_STUB_PATH) if self.MODEL_STUB_PATH else BUNDLED_STUB

    @property
    def default_folder(self) -> Path:
        return Path(self.BASE_PATH) / self.MODELS_FOLDER.rstrip("/")


settings = Settings()
