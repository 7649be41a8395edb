"""Configuration for the source inspector.

All settings can be overridden via ``INSPECTOR_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InspectorConfig(BaseSettings):
    """Fetch fanout, time budget and extraction limits."""

    model_config = SettingsConfigDict(
        env_prefix="INSPECTOR_",
        case_sensitive=False,
        extra="ignore",
    )

    max_concurrency: int = Field(
        default=3,
        ge=1,
        le=16,
        description="Maximum fetches in flight per batch",
    )
    request_timeout: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="Per-request time budget in seconds (no retries)",
    )
    body_chars: int = Field(
        default=2000,
        ge=100,
        description="Characters of visible body text kept per page",
    )
    max_urls: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum URLs accepted in one batch",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; ClawPulse/0.1; +source-check)",
    )
