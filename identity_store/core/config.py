from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    PROJECT_NAME: str = "User Identity Store"
    DATABASE_URL: str = "sqlite:///./identity_store.db"
    DB_ECHO: bool = False
    DB_BUSY_TIMEOUT: int = 30
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None
    AUTO_MIGRATE: bool = False
    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
