"""
DigPaper - Configuration
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

# Carrega .env da raiz do projeto (sem sobrescrever variáveis já definidas)
env_file = Path(__file__).parent.parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file)


class Settings(BaseSettings):
    # App
    APP_NAME: str = "DigPaper"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./digpaper.db"
    DB_POOL_SIZE: int = 5

    # Ficheiros
    UPLOADS_DIR: str = "./uploads"
    WEB_DIR: str = "./web"
    MAX_UPLOAD_SIZE_MB: int = 100
    UPLOAD_CHUNK_SIZE: int = 64 * 1024

    # Security - sem chave a API fica aberta (modo desenvolvimento)
    APP_API_KEY: Optional[str] = None

    # CORS
    CORS_ORIGINS: list = ["*"]

    # Forum
    AUTO_POST_ASSIGNED_PHOTOS: bool = False

    # Email webhook
    RATE_LIMIT_ENABLED: bool = True
    EMAIL_WEBHOOK_RATE_LIMIT: str = "60/minute"

    # Push notifications
    VAPID_SUBJECT: str = "mailto:admin@digpaper.local"

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def uploads_path(self) -> Path:
        return Path(self.UPLOADS_DIR)

    class Config:
        extra = "ignore"
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
