from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Capture configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(env_prefix="BLECAP_", env_file=".env")

    # Ingestion settings
    buffer_capacity: int = Field(100, gt=0, description="Frames held before drop-oldest")
    flush_threshold: int = Field(50, gt=0, description="Buffered frames that trigger a flush")
    flush_interval: float = Field(0.5, gt=0, description="Seconds between timed flushes")

    # Analysis settings
    anomaly_time_window: float = Field(1.0, gt=0, description="Anomaly bucket width in seconds")
    deviation_threshold: float = Field(
        3.0,
        ge=0,
        description="Standard deviations from the device mean that mark an anomaly",
    )

    # Caching settings
    cache_enabled: bool = Field(True, description="Memoise payload classification")
    signature_cache_size: int = Field(4096, description="Maximum entries in signature cache")

    # Logging settings
    log_level: str = Field("INFO", description="Level used by blecap loggers")


@lru_cache()
def get_settings() -> Settings:
    """Return a singleton settings instance."""
    return Settings()


settings = get_settings()
