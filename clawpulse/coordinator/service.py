"""Action coordinator: dispatches agent actions to handlers.

Each handler checks its preconditions, performs at most one terminal
write, and returns the notifications for the caller. Precondition
failures are silent: a malformed, stale or unauthorized action produces
an empty result rather than an error, so loosely trusted agents learn
nothing from probing. Story submission is the exception and always
answers with a decision.

Close policy: only the agent that submitted a thread may close it, and
that agent receives a terminal ``close`` notification.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from clawpulse.coordinator.actions import (
    BreakAction,
    CloseAction,
    QueryAction,
    ReactAction,
    UnknownActionError,
    UpdateAction,
    parse_action,
)
from clawpulse.coordinator.schemas import OutgoingNotification, ProcessResult
from clawpulse.feed.config import FeedConfig
from clawpulse.feed.repository import FeedRepository
from clawpulse.feed.schemas import (
    VALID_THREAD_STATUSES,
    AgentStats,
    FeedStats,
    LeaderboardEntry,
    Reaction,
    ReactionCounts,
    Thread,
    Update,
)
from clawpulse.observability.metrics import get_metrics
from clawpulse.validation.schemas import StorySubmission, ValidationResult
from clawpulse.validation.validator import StoryValidator

logger = logging.getLogger(__name__)

QUERY_TYPES: frozenset[str] = frozenset({
    "threads",
    "thread",
    "category",
    "agent",
    "leaderboard",
    "stats",
})

STORE_FAILED = "Failed to record story, please retry."


class QueryError(Exception):
    """A query that cannot be answered; the message goes back to the agent."""


class ActionCoordinator:
    """Processes agent actions against the feed.

    Args:
        repository: Feed persistence.
        validator: Story validator used for submissions.
        feed_config: Category set and paging defaults.
    """

    def __init__(
        self,
        repository: FeedRepository,
        validator: StoryValidator,
        feed_config: FeedConfig | None = None,
    ) -> None:
        self._repo = repository
        self._validator = validator
        self._config = feed_config or FeedConfig()

    @property
    def repository(self) -> FeedRepository:
        return self._repo

    # ── Action dispatch ─────────────────────────────────────

    async def process(
        self,
        from_agent: str,
        action: str,
        payload: dict[str, Any] | None = None,
    ) -> ProcessResult:
        """Handle one agent action.

        Args:
            from_agent: Address of the acting agent.
            action: Action name (break, update, react, close, query).
            payload: Action payload as received.

        Returns:
            Outgoing notifications and, where relevant, the affected thread id.
        """
        metrics = get_metrics()

        try:
            parsed = parse_action(action, payload)
        except UnknownActionError:
            logger.debug("Ignoring unknown action %r from %s", action, from_agent)
            metrics.record_action("unknown", "dropped")
            return ProcessResult.dropped()
        except ValidationError as e:
            logger.info(
                "Dropping malformed %s action from %s (%d errors)",
                action,
                from_agent,
                e.error_count(),
            )
            metrics.record_action(action, "dropped")
            return ProcessResult.dropped()

        try:
            if isinstance(parsed, BreakAction):
                result = await self._handle_break(from_agent, parsed)
            elif isinstance(parsed, UpdateAction):
                result = await self._handle_update(from_agent, parsed)
            elif isinstance(parsed, ReactAction):
                result = await self._handle_react(from_agent, parsed)
            elif isinstance(parsed, CloseAction):
                result = await self._handle_close(from_agent, parsed)
            else:
                result = await self._handle_query(from_agent, parsed)
        except Exception:
            logger.exception("Action %s from %s failed", action, from_agent)
            metrics.record_action(parsed.action_name, "error")
            return ProcessResult.dropped()

        if result.outgoing:
            outcome = result.outgoing[0].action
        elif result.applied:
            outcome = "applied"
        else:
            outcome = "dropped"
        metrics.record_action(parsed.action_name, outcome)
        return result

    # ── Break: agent submits a story ────────────────────────

    async def _handle_break(self, from_agent: str, action: BreakAction) -> ProcessResult:
        story = StorySubmission(
            headline=action.headline,
            summary=action.summary,
            category=action.category,
            source_urls=list(action.source_urls),
        )
        verdict = await self._validator.validate(story)
        thread = self._thread_from_verdict(from_agent, story, verdict)

        try:
            thread = await self._repo.insert_thread(thread)
        except Exception:
            logger.exception("Failed to store thread %s", thread.thread_id)
            return ProcessResult(
                outgoing=[
                    OutgoingNotification(
                        to_address=from_agent,
                        action="reject",
                        payload={
                            "threadId": None,
                            "headline": thread.headline,
                            "notes": STORE_FAILED,
                            "retryable": True,
                        },
                    )
                ]
            )

        logger.info(
            "Story %s from %s %s",
            thread.thread_id,
            from_agent,
            "accepted" if verdict.valid else "rejected",
        )

        if verdict.valid:
            notification = OutgoingNotification(
                to_address=from_agent,
                action="confirm",
                payload={
                    "threadId": thread.thread_id,
                    "headline": thread.headline,
                    "category": thread.category,
                    "notes": verdict.notes,
                },
            )
        else:
            notification = OutgoingNotification(
                to_address=from_agent,
                action="reject",
                payload={
                    "threadId": thread.thread_id,
                    "headline": thread.headline,
                    "notes": verdict.notes,
                    "retryable": verdict.retryable,
                },
            )
        return ProcessResult(
            outgoing=[notification],
            thread_id=thread.thread_id,
            applied=True,
        )

    def _thread_from_verdict(
        self,
        from_agent: str,
        story: StorySubmission,
        verdict: ValidationResult,
    ) -> Thread:
        # Rejected stories are kept for audit under a valid category.
        if verdict.valid:
            category = story.category
            headline = story.headline
        else:
            category = self._config.safe_category(story.category)
            headline = story.headline or "Untitled"

        return Thread(
            status="live" if verdict.valid else "rejected",
            category=category,
            headline=headline,
            summary=story.summary,
            source_urls=story.source_urls,
            submitted_by=from_agent,
            validation_notes=verdict.notes,
            validated_at=datetime.now(timezone.utc),
        )

    # ── Update: agent posts to a live thread ────────────────

    async def _handle_update(self, from_agent: str, action: UpdateAction) -> ProcessResult:
        update = Update(
            thread_id=action.thread_id,
            author_address=from_agent,
            body=action.body,
            source_urls=list(action.source_urls),
        )
        created = await self._repo.insert_update(update)
        if created is None:
            logger.debug("Update for %s dropped: thread not live", action.thread_id)
            return ProcessResult.dropped()

        logger.info("Update %s posted to %s", created.update_id, created.thread_id)
        return ProcessResult(thread_id=created.thread_id, applied=True)

    # ── React: agent reacts to an update ────────────────────

    async def _handle_react(self, from_agent: str, action: ReactAction) -> ProcessResult:
        reaction = Reaction(
            update_id=action.update_id,
            author_address=from_agent,
            kind=action.kind,
        )
        stored = await self._repo.upsert_reaction(reaction)
        if stored is None:
            logger.debug("Reaction dropped: update %s not found", action.update_id)
            return ProcessResult.dropped()
        return ProcessResult(applied=True)

    # ── Close: submitter closes a live thread ───────────────

    async def _handle_close(self, from_agent: str, action: CloseAction) -> ProcessResult:
        closed = await self._repo.close_thread(action.thread_id, from_agent)
        if closed is None:
            logger.debug(
                "Close of %s by %s dropped: missing, not live, or not submitter",
                action.thread_id,
                from_agent,
            )
            return ProcessResult.dropped()

        logger.info("Thread %s closed by %s", closed.thread_id, from_agent)
        return ProcessResult(
            outgoing=[
                OutgoingNotification(
                    to_address=closed.submitted_by,
                    action="close",
                    payload={"threadId": closed.thread_id, "headline": closed.headline},
                    terminal=True,
                )
            ],
            thread_id=closed.thread_id,
            applied=True,
        )

    # ── Query: read-only fan-out ────────────────────────────

    async def _handle_query(self, from_agent: str, action: QueryAction) -> ProcessResult:
        try:
            data = await self._run_query(from_agent, action)
        except QueryError as e:
            return ProcessResult(
                outgoing=[
                    OutgoingNotification(
                        to_address=from_agent,
                        action="query-error",
                        payload={"type": action.type, "error": str(e)},
                    )
                ]
            )

        return ProcessResult(
            outgoing=[
                OutgoingNotification(
                    to_address=from_agent,
                    action="query-result",
                    payload={"type": action.type, "data": data},
                )
            ],
            thread_id=action.thread_id if action.type == "thread" else None,
        )

    async def _run_query(self, from_agent: str, action: QueryAction) -> dict[str, Any]:
        if action.type not in QUERY_TYPES:
            raise QueryError(f"Unknown query type: {action.type}")

        if action.type == "threads":
            if action.status not in VALID_THREAD_STATUSES:
                raise QueryError(f"Invalid status: {action.status}")
            if action.category is not None and not self._config.is_valid_category(
                action.category
            ):
                raise QueryError(f"Invalid category: {action.category}")
            threads = await self.get_threads(
                status=action.status,
                category=action.category,
                limit=action.limit,
                offset=action.offset,
            )
            return {"threads": [t.to_dict() for t in threads]}

        if action.type == "thread":
            if not action.thread_id:
                raise QueryError("Missing threadId")
            detail = await self.get_thread_detail(action.thread_id)
            if detail is None:
                raise QueryError("Thread not found")
            return detail

        if action.type == "category":
            category = action.category or ""
            if not self._config.is_valid_category(category):
                raise QueryError(f"Invalid category: {category}")
            threads = await self.get_threads(
                status="live",
                category=category,
                limit=action.limit,
                offset=action.offset,
            )
            return {"category": category, "threads": [t.to_dict() for t in threads]}

        if action.type == "agent":
            stats = await self.get_agent_stats(action.address or from_agent)
            return stats.to_dict()

        if action.type == "leaderboard":
            entries = await self.get_leaderboard(action.limit)
            return {"leaderboard": [e.to_dict() for e in entries]}

        stats = await self.get_stats()
        return stats.to_dict()

    # ── Public read methods ─────────────────────────────────

    async def get_threads(
        self,
        *,
        status: str = "live",
        category: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Thread]:
        return await self._repo.get_threads(
            status=status or "live",
            category=category,
            limit=limit or self._config.default_thread_limit,
            offset=max(offset, 0),
        )

    async def get_thread(self, thread_id: str) -> Thread | None:
        return await self._repo.get_thread(thread_id)

    async def get_updates(self, thread_id: str) -> list[Update]:
        return await self._repo.get_updates(thread_id)

    async def get_update_reactions(self, update_id: str) -> ReactionCounts:
        return await self._repo.get_update_reactions(update_id)

    async def get_thread_detail(self, thread_id: str) -> dict[str, Any] | None:
        """Thread plus its updates, each carrying reaction counts."""
        thread = await self._repo.get_thread(thread_id)
        if thread is None:
            return None

        updates = await self._repo.get_updates(thread.thread_id)
        items = []
        for update in updates:
            counts = await self._repo.get_update_reactions(update.update_id)
            items.append({**update.to_dict(), "reactions": counts.to_dict()})
        return {"thread": thread.to_dict(), "updates": items}

    async def get_agent_stats(self, address: str) -> AgentStats:
        return await self._repo.get_agent_stats(address)

    async def get_leaderboard(self, limit: int | None = None) -> list[LeaderboardEntry]:
        return await self._repo.get_leaderboard(
            limit or self._config.default_leaderboard_limit
        )

    async def get_stats(self) -> FeedStats:
        return await self._repo.get_stats()

    def get_categories(self) -> tuple[str, ...]:
        return self._config.categories
