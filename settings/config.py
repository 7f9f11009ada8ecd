import os
from pydantic_settings import BaseSettings
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    """Configuration settings for the application."""
    PROJECT_NAME: str = "Restaurant API"
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "restaurant")

    # token signing, no default: startup fails when it is not configured
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    PORT: int = 5000
    CLIENT_URLS: str = "http://localhost:5173,http://localhost:5174"

    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024

    LOG_LEVEL: str = "INFO"

    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_NAME: str = "Restaurant Admin"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def client_origins(self) -> List[str]:
        return [url.strip() for url in self.CLIENT_URLS.split(",") if url.strip()]

settings = Settings()
