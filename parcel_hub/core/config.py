"""
Application configuration

Settings are read from the environment (or a .env file) via pydantic-settings.
Carrier credentials are owned by the individual adapters and are not kept here.
"""
import json
import logging
from typing import List, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Carriers queried when ENABLED_CARRIERS is not set, in precedence order
DEFAULT_ENABLED_CARRIERS = ["DHL", "FEDEX", "UPS"]

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App
    APP_NAME: str = "Parcel Hub"
    ENVIRONMENT: str = "production"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Carriers - accepts JSON array or comma-separated string.
    # Order defines precedence for the composite service.
    ENABLED_CARRIERS: Union[str, List[str]] = DEFAULT_ENABLED_CARRIERS

    # Outbound carrier HTTP calls
    CARRIER_HTTP_TIMEOUT_SECONDS: float = 30.0
    CARRIER_USE_SANDBOX: bool = False

    @field_validator("ENABLED_CARRIERS", mode="before")
    @classmethod
    def parse_enabled_carriers(cls, v):
        if isinstance(v, str):
            if not v.strip():
                return list(DEFAULT_ENABLED_CARRIERS)
            # Try JSON first
            if v.strip().startswith("["):
                try:
                    v = json.loads(v)
                except json.JSONDecodeError:
                    pass
            if isinstance(v, str):
                v = v.split(",")
        if isinstance(v, list):
            codes = []
            for code in v:
                code = str(code).strip().upper()
                if code and code not in codes:
                    codes.append(code)
            return codes
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        level = str(v or "INFO").strip().upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning(f"Unknown LOG_LEVEL {v!r}, falling back to INFO")
            return "INFO"
        return level


settings = Settings()
