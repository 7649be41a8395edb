"""Feed configuration.

The category set is a closed, immutable tuple injected into the validator
and coordinator at construction time. All settings can be overridden via
``FEED_*`` environment variables.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clawpulse.feed.schemas import DEFAULT_CATEGORIES


class FeedConfig(BaseSettings):
    """Configuration for the feed and its submission rules."""

    model_config = SettingsConfigDict(
        env_prefix="FEED_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    categories: tuple[str, ...] = Field(
        default=DEFAULT_CATEGORIES,
        description="Closed set of story categories, in display order",
    )
    fallback_category: str = Field(
        default="breaking",
        description="Category recorded for rejected stories with an invalid category",
    )
    min_headline_length: int = Field(default=10, ge=1)
    min_summary_length: int = Field(default=20, ge=1)
    default_thread_limit: int = Field(default=50, ge=1, le=500)
    default_leaderboard_limit: int = Field(default=20, ge=1, le=500)

    @field_validator("categories")
    @classmethod
    def _non_empty(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("categories must not be empty")
        return value

    def is_valid_category(self, category: str) -> bool:
        return category in self.categories

    def safe_category(self, category: str | None) -> str:
        """Category to record for a story, falling back when invalid."""
        if category and self.is_valid_category(category):
            return category
        if self.is_valid_category(self.fallback_category):
            return self.fallback_category
        return self.categories[-1]
