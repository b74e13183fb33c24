"""
Configuration Module
====================

Application settings loaded from environment variables and an optional .env
file: reference-data source, request timeout, output directory, log level.
"""

from pydantic_settings import BaseSettings
from pydantic import field_validator
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """
    Application settings, populated from the environment by pydantic-settings.

    Attributes:
        REFERENCE_DATA_URL: CSV listing developers and their projects
        REQUEST_TIMEOUT: seconds to wait for the reference-data download
        OUTPUT_DIR: where generated workbooks and JSON summaries are written
        LOG_LEVEL: level applied to the ``tablesplit`` logger namespace
        MAX_UPLOAD_BYTES: uploads larger than this are rejected by the API
    """
    REFERENCE_DATA_URL: str = (
        "https://hebbkx1anhila5yf.public.blob.vercel-storage.com/"
        "compounds_developers_list_final-hPrjHwy1d7p9LDKZcRoHHacIHU1ThQ.csv"
    )
    REQUEST_TIMEOUT: float = 30.0
    OUTPUT_DIR: str = "output"
    LOG_LEVEL: str = "INFO"
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept only the standard logging level names."""
        level = (v or "").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got {v!r}")
        return level

    @field_validator("REQUEST_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("REQUEST_TIMEOUT must be positive")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


# Module-level singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance, creating it on first call.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
