# Settings management (reads env vars/secrets)
# backend/app/core/config.py

import json
import logging
from functools import lru_cache
from typing import Annotated, List, Optional, Union

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables or .env file.
    """
    # --- Project Info ---
    PROJECT_NAME: str = Field("StreamFlix Catalog API", validation_alias="PROJECT_NAME")
    API_V1_STR: str = Field("/api", validation_alias="API_V1_STR")
    VERSION: str = Field("1.0.0", validation_alias="APP_VERSION")

    # --- Logging ---
    LOG_LEVEL: str = Field("INFO", validation_alias="LOG_LEVEL")

    # --- Database (MongoDB) ---
    # Use SecretStr to prevent accidental logging of the URI
    MONGODB_URI: SecretStr = Field(
        SecretStr("mongodb://localhost:27017/streamflix"), validation_alias="MONGODB_URI"
    )
    # Used when the URI carries no default database
    MONGODB_DB_NAME: str = Field("streamflix", validation_alias="MONGODB_DB_NAME")

    # --- Cache (Redis) ---
    # Caching is disabled when no URL is configured
    REDIS_URL: Optional[SecretStr] = Field(None, validation_alias="REDIS_URL")
    CACHE_TTL_CATEGORIES: int = Field(
        default=600,
        validation_alias="CACHE_TTL_CATEGORIES",
        description="Time-to-live for the cached category list in seconds"
    )
    CACHE_TTL_TOP_RATED: int = Field(
        default=300,
        validation_alias="CACHE_TTL_TOP_RATED",
        description="Time-to-live for the cached top rated movie list in seconds"
    )

    # --- Authentication ---
    JWT_SECRET: SecretStr = Field(SecretStr("change-me"), validation_alias="JWT_SECRET")
    JWT_ALGORITHM: str = Field("HS256", validation_alias="JWT_ALGORITHM")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=30 * 24 * 60,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # --- CORS ---
    # Expects a comma-separated string in env var like "http://localhost:3000,https://*.example.com"
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        validation_alias="BACKEND_CORS_ORIGINS"
    )

    @field_validator("BACKEND_CORS_ORIGINS", mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and v.startswith("["):
            return json.loads(v)
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        raise ValueError(f"Invalid BACKEND_CORS_ORIGINS format: {v}")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

# Settings are loaded only once
@lru_cache()
def get_settings() -> Settings:
    """Returns the application settings instance."""
    logger.info("Attempting to load application settings...")
    try:
        settings_instance = Settings()
        logger.info(f"Settings loaded successfully for Project: {settings_instance.PROJECT_NAME}")
        logger.info(f"Log Level: {settings_instance.LOG_LEVEL}")
        logger.info(f"CORS Origins: {settings_instance.BACKEND_CORS_ORIGINS}")
        logger.info(f"Cache enabled: {settings_instance.REDIS_URL is not None}")
        return settings_instance
    except Exception as e:
        logger.critical(f"CRITICAL ERROR: Failed to load application settings: {e}", exc_info=True)
        raise RuntimeError(f"Could not load settings: {e}")


settings: Settings = get_settings()
