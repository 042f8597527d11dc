# growgraph/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    CAREER_API_URL: str = "http://localhost:3001/api"
    CAREER_API_TIMEOUT: float = 30.0
    CAREER_API_RETRIES: int = 3
    LAYOUT_RADIUS: float = 260.0
    LAYOUT_MAX_SLOTS: int = 7
    LIMITER_STORAGE_URI: str = "memory://"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
