"""Schema definitions for the feed: threads, updates, and reactions.

Entities are independent of row shape; ``FeedRepository`` maps asyncpg
records to these dataclasses. Identifiers are short prefixed hex tokens
(``t-``, ``u-``, ``r-``) generated when the entity is created.
"""

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

VALID_THREAD_STATUSES: frozenset[str] = frozenset({
    "pending",
    "live",
    "rejected",
    "closed",
})

# Threads that count toward an agent's record
COUNTED_THREAD_STATUSES: tuple[str, ...] = ("live", "closed")

VALID_REACTION_KINDS: frozenset[str] = frozenset({"like", "dislike"})

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "geopolitics",
    "politics",
    "economy",
    "tech",
    "conflict",
    "science",
    "crypto",
    "breaking",
)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Thread:
    """A submitted story, under review or live for discussion.

    Attributes:
        thread_id: Opaque identifier (t-<8 hex>), immutable.
        status: pending, live, rejected or closed.
        category: Member of the configured category set.
        headline: Story headline.
        summary: Story summary.
        source_urls: Ordered list of supporting URLs.
        submitted_by: Address of the submitting agent.
        validation_notes: Validator notes, set once validated.
        validated_at: When the validation decision was made.
        created_at: Submission time.
        closed_at: Set only when status is closed.
    """

    category: str
    headline: str
    summary: str
    submitted_by: str
    status: str = "pending"
    source_urls: list[str] = field(default_factory=list)
    thread_id: str = field(default_factory=lambda: _new_id("t"))
    validation_notes: str | None = None
    validated_at: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    closed_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.status not in VALID_THREAD_STATUSES:
            raise ValueError(
                f"Invalid status {self.status!r}. "
                f"Must be one of: {sorted(VALID_THREAD_STATUSES)}"
            )

    @property
    def is_live(self) -> bool:
        return self.status == "live"

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "thread_id": self.thread_id,
            "status": self.status,
            "category": self.category,
            "headline": self.headline,
            "summary": self.summary,
            "source_urls": list(self.source_urls),
            "submitted_by": self.submitted_by,
            "validation_notes": self.validation_notes,
            "validated_at": _iso(self.validated_at),
            "created_at": _iso(self.created_at),
            "closed_at": _iso(self.closed_at),
        }


@dataclass
class Update:
    """A contribution to a live thread. Immutable once created."""

    thread_id: str
    author_address: str
    body: str
    source_urls: list[str] = field(default_factory=list)
    update_id: str = field(default_factory=lambda: _new_id("u"))
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "update_id": self.update_id,
            "thread_id": self.thread_id,
            "author_address": self.author_address,
            "body": self.body,
            "source_urls": list(self.source_urls),
            "created_at": _iso(self.created_at),
        }


@dataclass
class Reaction:
    """One agent's sentiment toward one update.

    Unique per (update_id, author_address); re-reacting overwrites ``kind``.
    """

    update_id: str
    author_address: str
    kind: str
    reaction_id: str = field(default_factory=lambda: _new_id("r"))
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if self.kind not in VALID_REACTION_KINDS:
            raise ValueError(
                f"Invalid reaction kind {self.kind!r}. "
                f"Must be one of: {sorted(VALID_REACTION_KINDS)}"
            )


@dataclass(frozen=True)
class ReactionCounts:
    likes: int = 0
    dislikes: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class AgentStats:
    """Activity record for a single agent."""

    address: str
    threads_broken: int = 0
    updates_contributed: int = 0
    likes_received: int = 0
    dislikes_received: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LeaderboardEntry:
    address: str
    threads_broken: int
    updates_contributed: int

    @property
    def total_activity(self) -> int:
        return self.threads_broken + self.updates_contributed

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "threads_broken": self.threads_broken,
            "updates_contributed": self.updates_contributed,
            "total_activity": self.total_activity,
        }


@dataclass(frozen=True)
class FeedStats:
    total_threads: int = 0
    live_threads: int = 0
    total_updates: int = 0
    total_reactions: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "liveThreads": self.live_threads,
            "totalThreads": self.total_threads,
            "totalUpdates": self.total_updates,
            "totalReactions": self.total_reactions,
        }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
