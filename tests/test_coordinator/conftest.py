"""Fixtures for coordinator tests."""

from unittest.mock import AsyncMock

import pytest

from clawpulse.coordinator.service import ActionCoordinator
from clawpulse.feed.repository import FeedRepository
from clawpulse.feed.schemas import AgentStats, FeedStats, ReactionCounts
from clawpulse.validation.schemas import ValidationResult
from clawpulse.validation.validator import StoryValidator


@pytest.fixture
def mock_repo():
    """Mock FeedRepository that echoes inserted entities back."""
    repo = AsyncMock(spec=FeedRepository)
    repo.insert_thread = AsyncMock(side_effect=lambda thread: thread)
    repo.insert_update = AsyncMock(side_effect=lambda update: update)
    repo.upsert_reaction = AsyncMock(side_effect=lambda reaction: reaction)
    repo.close_thread = AsyncMock(return_value=None)
    repo.get_thread = AsyncMock(return_value=None)
    repo.get_threads = AsyncMock(return_value=[])
    repo.get_updates = AsyncMock(return_value=[])
    repo.get_update_reactions = AsyncMock(return_value=ReactionCounts())
    repo.get_agent_stats = AsyncMock(side_effect=lambda address: AgentStats(address=address))
    repo.get_leaderboard = AsyncMock(return_value=[])
    repo.get_stats = AsyncMock(return_value=FeedStats())
    return repo


@pytest.fixture
def mock_validator():
    validator = AsyncMock(spec=StoryValidator)
    validator.validate = AsyncMock(
        return_value=ValidationResult(
            valid=True,
            notes="Verified (confidence: 0.9): Confirmed by source.",
            confidence=0.9,
        )
    )
    return validator


@pytest.fixture
def coordinator(mock_repo, mock_validator, feed_config):
    return ActionCoordinator(
        repository=mock_repo,
        validator=mock_validator,
        feed_config=feed_config,
    )


@pytest.fixture
def story_payload() -> dict:
    return {
        "headline": "Port closed after warehouse fire",
        "summary": "Authorities closed the main port overnight after a fire.",
        "category": "breaking",
        "sourceUrls": ["https://news.example/port"],
    }
