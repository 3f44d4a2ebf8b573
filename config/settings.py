"""Configuration management using pydantic-settings."""
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MK Central Lounge API configuration
    upstream_base_url: str = "https://lounge.mkcentral.com"
    upstream_timeout_seconds: float = 10.0
    user_agent: str = "MKWorld-Overlay/1.0"

    # Cache settings
    cache_ttl_seconds: int = 60
    # Entries older than ttl * multiplier are swept on the next write
    cache_eviction_multiplier: int = 2
    coalesce_timeout_seconds: float = 30.0

    # HTTP surface
    cors_origins: List[str] = ["*"]
    static_directory: Path = Path("./static")
    dist_directory: Path = Path("./dist")
    port: int = 3000

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
