"""Configuration for the credibility oracle.

Settings can be overridden via ``CREDIBILITY_*`` environment variables;
the API key also reads the standard ``OPENAI_API_KEY``.

Example:
    OPENAI_API_KEY=sk-...
    CREDIBILITY_MODEL=gpt-4o-mini
"""

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CredibilityConfig(BaseSettings):
    """LLM selection, timeout and circuit breaker tuning."""

    model_config = SettingsConfigDict(
        env_prefix="CREDIBILITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("CREDIBILITY_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="OpenAI API key for credibility assessment",
    )
    model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model used for the verdict",
    )
    llm_timeout: float = Field(
        default=30.0,
        ge=5.0,
        le=120.0,
        description="Timeout in seconds for the oracle call",
    )
    max_retries: int = Field(
        default=0,
        ge=0,
        le=3,
        description="SDK retries per oracle call; each retry gets its own timeout",
    )
    max_source_chars: int = Field(
        default=12000,
        ge=500,
        description="Cap on labeled source text sent to the model",
    )

    circuit_failure_threshold: int = Field(
        default=5,
        ge=1,
        description="Consecutive failures before opening circuit",
    )
    circuit_recovery_timeout: float = Field(
        default=60.0,
        ge=1.0,
        description="Seconds before attempting a recovery call",
    )
