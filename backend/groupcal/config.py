"""
Application configuration loaded from environment variables.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./groupcal.db"

    # Backends, in registration order the first one is the default
    enabled_backends: List[str] = ["local"]

    # Remote calendar account (CalDAV)
    caldav_url: Optional[str] = None
    caldav_username: Optional[str] = None
    caldav_password: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
