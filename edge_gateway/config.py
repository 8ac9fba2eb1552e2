from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    # App
    APP_NAME: str = "Edge Gateway"
    DEBUG: bool = False
    
    # Backend
    BACKEND_URL: str = Field(
        default="",
        validation_alias=AliasChoices("BACKEND_URL", "NEXT_PUBLIC_BACKEND_URL"),
    )
    DEV_BACKEND_DEFAULT_URL: str = "http://localhost:8000"
    SECONDARY_BACKEND_DEFAULT_URL: str = "http://localhost:5000"
    UPSTREAM_TIMEOUT_SECONDS: float = 30.0
    
    # Routes
    ROUTES_CONFIG_PATH: str | None = None
    
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

@lru_cache()
def get_settings() -> Settings:
    return Settings()
