"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    # Feature flags
    enable_export: bool = Field(default=True, description="Enable projection export")

    # Strategy defaults
    default_compounding: str = Field(default="monthly", description="Compounding used when none is given")
    default_inflation_rate: float = Field(default=0.05, gt=-1, description="Annual inflation as decimal")
    default_currency: str = Field(default="INR", description="ISO currency code")

    # Normalization
    normalization_tolerance: float = Field(default=1e-6, gt=0, description="Sum-to-100 tolerance")
    strict_tolerance: float = Field(default=0.01, gt=0, description="Strict-mode sum tolerance")

    # Performance
    parallel_projection: bool = Field(default=False, description="Project allocations in a thread pool")
    max_workers: int = Field(default=4, ge=1, le=64)

    # Export
    export_dir: str = Field(default="results", description="Directory for exported projections")

    model_config = {
        "env_prefix": "INVESTPLAN_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
