"""
Application configuration using Pydantic Settings
"""

from typing import Optional
from pydantic import validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Upstream directory API
    API_URL: str = "http://universities.hipolabs.com/search"
    DEFAULT_COUNTRY: str = "United+States"
    DEFAULT_LIMIT: int = 500
    REQUEST_TIMEOUT: float = 30.0

    # Snapshot storage
    DATA_FILE_PATH: str = "./data/universities.json"

    # HTTP server; PORT is only required to serve the API
    API_HOST: str = "0.0.0.0"
    PORT: Optional[int] = None

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # ETL Configuration
    RUN_ETL_ON_STARTUP: bool = True
    ETL_CRON: str = "0 0 * * *"
    MAX_RETRIES: int = 3
    RETRY_INITIAL_DELAY: float = 1.0
    ETL_TIMEZONE: str = "UTC"

    @validator("RUN_ETL_ON_STARTUP", pre=True)
    def parse_startup_flag(cls, v):
        """Only a case-insensitive "true" enables the startup run"""
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() == "true"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
