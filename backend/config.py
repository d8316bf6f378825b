# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

DEFAULT_SECRET_KEY = "default-secret-key-change-in-production"


class Settings(BaseSettings):
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ALGORITHM: str = "HS256"
    TOKEN_ISSUER: str = "rgp-backend-enquiry"
    DATABASE_URL: str = "sqlite:///./database_enquiry.db"

    # Upper bound for a single store operation, in seconds
    STORE_TIMEOUT_SECONDS: int = 10

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"
    APP_ENV: str = "development"
    APP_VERSION: str = "1.0.0"

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

    @property
    def database_url(self) -> str:
        # SQLAlchemy requires the postgresql:// scheme
        if self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
        return self.DATABASE_URL

    @property
    def uses_default_secret(self) -> bool:
        return self.SECRET_KEY == DEFAULT_SECRET_KEY


settings = Settings()


def get_settings() -> Settings:
    return settings
