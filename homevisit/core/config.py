from datetime import time
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "HomeVisit Client"

    # Base URL of the listing/booking REST API, without trailing slash
    API_BASE_URL: str = "http://localhost:8081/api"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Visiting hours, upper bound exclusive
    VISIT_HOURS_START: time = time(11, 0)
    VISIT_HOURS_END: time = time(19, 0)

    # Tokens this close to expiry are treated as expired
    TOKEN_EXPIRY_LEEWAY_SECONDS: int = 0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    """
    Preferred way: call get_settings() anywhere.
    Components also accept an explicit Settings instance (tests do this).
    """
    return Settings()
