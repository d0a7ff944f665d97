# app/core/config.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/108.0.0.0 Safari/537.36"
)

class Settings(BaseSettings):
    """Loads environment variables from .env file."""
    REQUEST_TIMEOUT: float = 8.0
    USER_AGENT: str = DEFAULT_USER_AGENT

    # {host} is replaced by the hostname of the analyzed page
    IP_LOOKUP_URL: str = "http://ip-api.com/json/{host}"
    GREEN_CHECK_URL: str = "https://api.thegreenwebfoundation.org/v2/greencheck/{host}"

    # Must stay below the httpx connection pool size (100)
    MAX_CONCURRENT_PROBES: int = 20

    DEFAULT_MONTHLY_VISITS: int = 10000
    INCLUDE_EXTENDED_METRICS: bool = True
    TRACK_THIRD_PARTY: bool = True

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

# Create a single instance of the settings to be used across the application
settings = Settings()
