# backend/config.py
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

# Sample dataset copied into a fresh data file on first start
DEFAULT_SEED_FILE = Path(__file__).parent / "data_source" / "products.json"

# Local dev origins of the web client
DEV_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


class Settings(BaseSettings):
    DATA_DIR: Path = Path("data")
    DATA_FILE: str = "products.json"
    SEED_FILE: Optional[Path] = DEFAULT_SEED_FILE

    FRONTEND_URL: Optional[str] = None
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    HOST: str = "127.0.0.1"
    PORT: int = 3000

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

    # SEED_FILE= (empty) disables seeding
    @field_validator("SEED_FILE", mode="before")
    @classmethod
    def empty_seed_is_none(cls, v):
        return v or None

    @property
    def data_path(self) -> Path:
        return self.DATA_DIR / self.DATA_FILE

    @property
    def cors_origins(self) -> List[str]:
        # Without a deployed frontend anything may call the API
        if not self.FRONTEND_URL:
            return ["*"]
        return DEV_ORIGINS + [self.FRONTEND_URL]


settings = Settings()
