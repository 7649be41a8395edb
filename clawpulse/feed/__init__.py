"""Feed persistence: threads, updates, and reactions.

Components:
- Thread / Update / Reaction: Dataclasses independent of row shape
- FeedConfig: Pydantic settings holding the closed category set
- FeedRepository: Conditional writes and read queries over asyncpg
"""

from clawpulse.feed.config import FeedConfig
from clawpulse.feed.repository import FeedRepository
from clawpulse.feed.schemas import (
    DEFAULT_CATEGORIES,
    VALID_REACTION_KINDS,
    VALID_THREAD_STATUSES,
    AgentStats,
    FeedStats,
    LeaderboardEntry,
    Reaction,
    ReactionCounts,
    Thread,
    Update,
)

__all__ = [
    "AgentStats",
    "DEFAULT_CATEGORIES",
    "FeedConfig",
    "FeedRepository",
    "FeedStats",
    "LeaderboardEntry",
    "Reaction",
    "ReactionCounts",
    "Thread",
    "Update",
    "VALID_REACTION_KINDS",
    "VALID_THREAD_STATUSES",
]
