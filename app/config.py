from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage: leave unset to run on the process-lifetime in-memory store
    database_url: Optional[str] = None
    sql_echo: bool = False

    # Session cookie / JWT
    jwt_secret: str = "change-me-dev"
    jwt_algorithm: str = "HS256"
    session_ttl_days: int = 7
    cookie_secure: bool = True

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def get_settings() -> Settings:
    return Settings()
