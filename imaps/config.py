# imaps/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./imaps.db"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 8

    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]
    ALLOWED_HOSTS: List[str] = ["*"]

    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    # INSW (Indonesia National Single Window) inventory API
    INSW_API_KEY: str = ""
    INSW_UNIQUE_KEY: str = ""
    INSW_USE_TEST_MODE: bool = True
    INSW_TIMEOUT_SECONDS: int = 30
    INSW_MAX_RETRIES: int = 3
    # claim SENT lebih tua dari ini boleh diambil alih request berikutnya
    INSW_STALE_CLAIM_SECONDS: int = 300

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding='utf-8', extra='ignore')

settings = Settings()
