"""Feed repository for thread, update and reaction persistence.

Every write that depends on a precondition is a single conditional
statement, so concurrent actions on the same thread resolve at the row
level: the caller whose statement matched gets the row back, every other
caller gets ``None``.
"""

import json
import logging
from typing import Any

from clawpulse.feed.schemas import (
    COUNTED_THREAD_STATUSES,
    AgentStats,
    FeedStats,
    LeaderboardEntry,
    Reaction,
    ReactionCounts,
    Thread,
    Update,
)
from clawpulse.storage.database import Database

logger = logging.getLogger(__name__)

_COUNTED_STATUSES_SQL = ", ".join(f"'{s}'" for s in COUNTED_THREAD_STATUSES)

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS threads (
    thread_id         TEXT PRIMARY KEY,
    status            TEXT NOT NULL DEFAULT 'pending',
    category          TEXT NOT NULL,
    headline          TEXT NOT NULL,
    summary           TEXT NOT NULL,
    source_urls       JSONB NOT NULL DEFAULT '[]',
    submitted_by      TEXT NOT NULL,
    validation_notes  TEXT,
    validated_at      TIMESTAMPTZ,
    created_at        TIMESTAMPTZ NOT NULL DEFAULT now(),
    closed_at         TIMESTAMPTZ,
    CONSTRAINT threads_closed_at_matches_status
        CHECK ((status = 'closed') = (closed_at IS NOT NULL))
);

CREATE INDEX IF NOT EXISTS idx_threads_status_created
    ON threads(status, created_at DESC);
CREATE INDEX IF NOT EXISTS idx_threads_submitted_by
    ON threads(submitted_by);

CREATE TABLE IF NOT EXISTS updates (
    update_id         TEXT PRIMARY KEY,
    thread_id         TEXT NOT NULL REFERENCES threads(thread_id),
    author_address    TEXT NOT NULL,
    body              TEXT NOT NULL,
    source_urls       JSONB NOT NULL DEFAULT '[]',
    created_at        TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_updates_thread_created
    ON updates(thread_id, created_at ASC);
CREATE INDEX IF NOT EXISTS idx_updates_author
    ON updates(author_address);

CREATE TABLE IF NOT EXISTS reactions (
    reaction_id       TEXT PRIMARY KEY,
    update_id         TEXT NOT NULL REFERENCES updates(update_id),
    author_address    TEXT NOT NULL,
    kind              TEXT NOT NULL CHECK (kind IN ('like', 'dislike')),
    created_at        TIMESTAMPTZ NOT NULL DEFAULT now(),
    UNIQUE (update_id, author_address)
);
"""


class FeedRepository:
    """Repository for feed persistence and querying.

    Tables:
        - threads: submitted stories and their lifecycle status
        - updates: contributions to live threads
        - reactions: one like/dislike per (update, agent)
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_tables(self) -> None:
        """Create feed tables and indexes if they don't exist."""
        await self._db.execute(CREATE_TABLES_SQL)
        logger.info("Feed tables initialized")

    # ── Writes ──────────────────────────────────────────────

    async def insert_thread(self, thread: Thread) -> Thread:
        """Insert a new thread.

        Args:
            thread: Thread to persist, already carrying its validation decision.

        Returns:
            The created Thread with DB-assigned defaults.
        """
        sql = """
            INSERT INTO threads (
                thread_id, status, category, headline, summary, source_urls,
                submitted_by, validation_notes, validated_at, created_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql,
            thread.thread_id,
            thread.status,
            thread.category,
            thread.headline,
            thread.summary,
            list(thread.source_urls),
            thread.submitted_by,
            thread.validation_notes,
            thread.validated_at,
            thread.created_at,
        )
        return _row_to_thread(row)

    async def close_thread(self, thread_id: str, closed_by: str) -> Thread | None:
        """Close a live thread if ``closed_by`` submitted it.

        Returns:
            The closed Thread, or None if the thread is missing, not live,
            or owned by another agent (including losing a concurrent close).
        """
        sql = """
            UPDATE threads
            SET status = 'closed', closed_at = now()
            WHERE thread_id = $1 AND status = 'live' AND submitted_by = $2
            RETURNING *
        """
        row = await self._db.fetchrow(sql, thread_id, closed_by)
        if row is None:
            return None
        return _row_to_thread(row)

    async def insert_update(self, update: Update) -> Update | None:
        """Insert an update only while its thread is live.

        Returns:
            The created Update, or None if the thread is missing or not live.
        """
        sql = """
            INSERT INTO updates (
                update_id, thread_id, author_address, body, source_urls, created_at
            )
            SELECT $1, t.thread_id, $3, $4, $5, $6
            FROM threads t
            WHERE t.thread_id = $2 AND t.status = 'live'
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql,
            update.update_id,
            update.thread_id,
            update.author_address,
            update.body,
            list(update.source_urls),
            update.created_at,
        )
        if row is None:
            return None
        return _row_to_update(row)

    async def upsert_reaction(self, reaction: Reaction) -> Reaction | None:
        """Insert or overwrite the reaction for (update_id, author_address).

        Returns:
            The stored Reaction, or None if the update does not exist.
        """
        sql = """
            INSERT INTO reactions (
                reaction_id, update_id, author_address, kind, created_at
            )
            SELECT $1, u.update_id, $3, $4, $5
            FROM updates u
            WHERE u.update_id = $2
            ON CONFLICT (update_id, author_address)
            DO UPDATE SET kind = EXCLUDED.kind
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql,
            reaction.reaction_id,
            reaction.update_id,
            reaction.author_address,
            reaction.kind,
            reaction.created_at,
        )
        if row is None:
            return None
        return _row_to_reaction(row)

    # ── Reads ───────────────────────────────────────────────

    async def get_thread(self, thread_id: str) -> Thread | None:
        sql = "SELECT * FROM threads WHERE thread_id = $1"
        row = await self._db.fetchrow(sql, thread_id)
        if row is None:
            return None
        return _row_to_thread(row)

    async def get_threads(
        self,
        *,
        status: str = "live",
        category: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Thread]:
        """List threads newest first.

        Args:
            status: Status filter.
            category: Optional category filter.
            limit: Maximum threads to return.
            offset: Offset for pagination.
        """
        conditions = ["status = $1"]
        params: list[Any] = [status]
        param_idx = 2

        if category is not None:
            conditions.append(f"category = ${param_idx}")
            params.append(category)
            param_idx += 1

        sql = f"""
            SELECT * FROM threads
            WHERE {" AND ".join(conditions)}
            ORDER BY created_at DESC
            LIMIT ${param_idx} OFFSET ${param_idx + 1}
        """
        params.extend([limit, offset])

        rows = await self._db.fetch(sql, *params)
        return [_row_to_thread(row) for row in rows]

    async def get_updates(self, thread_id: str) -> list[Update]:
        """List a thread's updates oldest first."""
        sql = """
            SELECT * FROM updates
            WHERE thread_id = $1
            ORDER BY created_at ASC
        """
        rows = await self._db.fetch(sql, thread_id)
        return [_row_to_update(row) for row in rows]

    async def get_update_reactions(self, update_id: str) -> ReactionCounts:
        """Aggregate like/dislike counts for one update."""
        sql = """
            SELECT
                COUNT(*) FILTER (WHERE kind = 'like') AS likes,
                COUNT(*) FILTER (WHERE kind = 'dislike') AS dislikes
            FROM reactions
            WHERE update_id = $1
        """
        row = await self._db.fetchrow(sql, update_id)
        if row is None:
            return ReactionCounts()
        return ReactionCounts(
            likes=row["likes"] or 0,
            dislikes=row["dislikes"] or 0,
        )

    async def get_agent_stats(self, address: str) -> AgentStats:
        """Threads reaching live/closed, updates, and reactions received."""
        sql = f"""
            SELECT
                (SELECT COUNT(*) FROM threads
                 WHERE submitted_by = $1 AND status IN ({_COUNTED_STATUSES_SQL}))
                    AS threads_broken,
                (SELECT COUNT(*) FROM updates WHERE author_address = $1)
                    AS updates_contributed,
                (SELECT COUNT(*) FROM reactions r
                 JOIN updates u ON r.update_id = u.update_id
                 WHERE u.author_address = $1 AND r.kind = 'like')
                    AS likes_received,
                (SELECT COUNT(*) FROM reactions r
                 JOIN updates u ON r.update_id = u.update_id
                 WHERE u.author_address = $1 AND r.kind = 'dislike')
                    AS dislikes_received
        """
        row = await self._db.fetchrow(sql, address)
        if row is None:
            return AgentStats(address=address)
        return AgentStats(
            address=address,
            threads_broken=row["threads_broken"] or 0,
            updates_contributed=row["updates_contributed"] or 0,
            likes_received=row["likes_received"] or 0,
            dislikes_received=row["dislikes_received"] or 0,
        )

    async def get_leaderboard(self, limit: int = 20) -> list[LeaderboardEntry]:
        """Rank agents by threads broken plus updates contributed.

        Ties are broken by address so results are reproducible.
        """
        sql = f"""
            WITH tb AS (
                SELECT submitted_by AS address, COUNT(*) AS cnt
                FROM threads
                WHERE status IN ({_COUNTED_STATUSES_SQL})
                GROUP BY submitted_by
            ),
            uc AS (
                SELECT author_address AS address, COUNT(*) AS cnt
                FROM updates
                GROUP BY author_address
            )
            SELECT
                COALESCE(tb.address, uc.address) AS address,
                COALESCE(tb.cnt, 0) AS threads_broken,
                COALESCE(uc.cnt, 0) AS updates_contributed
            FROM tb
            FULL OUTER JOIN uc ON tb.address = uc.address
            ORDER BY
                COALESCE(tb.cnt, 0) + COALESCE(uc.cnt, 0) DESC,
                COALESCE(tb.address, uc.address) ASC
            LIMIT $1
        """
        rows = await self._db.fetch(sql, limit)
        return [
            LeaderboardEntry(
                address=row["address"],
                threads_broken=row["threads_broken"],
                updates_contributed=row["updates_contributed"],
            )
            for row in rows
        ]

    async def get_stats(self) -> FeedStats:
        sql = """
            SELECT
                (SELECT COUNT(*) FROM threads) AS total_threads,
                (SELECT COUNT(*) FROM threads WHERE status = 'live') AS live_threads,
                (SELECT COUNT(*) FROM updates) AS total_updates,
                (SELECT COUNT(*) FROM reactions) AS total_reactions
        """
        row = await self._db.fetchrow(sql)
        if row is None:
            return FeedStats()
        return FeedStats(
            total_threads=row["total_threads"] or 0,
            live_threads=row["live_threads"] or 0,
            total_updates=row["total_updates"] or 0,
            total_reactions=row["total_reactions"] or 0,
        )


def _load_urls(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = json.loads(value)
    return list(value)


def _row_to_thread(row: Any) -> Thread:
    """Convert an asyncpg Record to a Thread."""
    return Thread(
        thread_id=row["thread_id"],
        status=row["status"],
        category=row["category"],
        headline=row["headline"],
        summary=row["summary"],
        source_urls=_load_urls(row.get("source_urls")),
        submitted_by=row["submitted_by"],
        validation_notes=row.get("validation_notes"),
        validated_at=row.get("validated_at"),
        created_at=row["created_at"],
        closed_at=row.get("closed_at"),
    )


def _row_to_update(row: Any) -> Update:
    """Convert an asyncpg Record to an Update."""
    return Update(
        update_id=row["update_id"],
        thread_id=row["thread_id"],
        author_address=row["author_address"],
        body=row["body"],
        source_urls=_load_urls(row.get("source_urls")),
        created_at=row["created_at"],
    )


def _row_to_reaction(row: Any) -> Reaction:
    """Convert an asyncpg Record to a Reaction."""
    return Reaction(
        reaction_id=row["reaction_id"],
        update_id=row["update_id"],
        author_address=row["author_address"],
        kind=row["kind"],
        created_at=row["created_at"],
    )

