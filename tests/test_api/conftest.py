"""Shared fixtures for API tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from clawpulse.api.app import create_app
from clawpulse.api.auth import require_local_client
from clawpulse.api.dependencies import (
    get_coordinator,
    get_database,
    get_directory_client,
    get_source_inspector,
)
from clawpulse.coordinator.service import ActionCoordinator
from clawpulse.directory.client import AgentDirectoryClient
from clawpulse.feed.schemas import DEFAULT_CATEGORIES, AgentStats, FeedStats
from clawpulse.inspector.service import SourceInspector


@pytest.fixture
def mock_coordinator():
    """Mock ActionCoordinator."""
    coordinator = AsyncMock(spec=ActionCoordinator)
    coordinator.get_threads = AsyncMock(return_value=[])
    coordinator.get_thread_detail = AsyncMock(return_value=None)
    coordinator.get_categories = MagicMock(return_value=DEFAULT_CATEGORIES)
    coordinator.get_stats = AsyncMock(return_value=FeedStats())
    coordinator.get_agent_stats = AsyncMock(
        side_effect=lambda address: AgentStats(address=address)
    )
    coordinator.get_leaderboard = AsyncMock(return_value=[])
    return coordinator


@pytest.fixture
def mock_inspector():
    inspector = AsyncMock(spec=SourceInspector)
    inspector.fetch = AsyncMock(return_value={})
    return inspector


@pytest.fixture
def mock_directory():
    directory = AsyncMock(spec=AgentDirectoryClient)
    directory.get_agent = AsyncMock(return_value=None)
    directory.get_names = AsyncMock(return_value={})
    return directory


@pytest.fixture
def mock_db():
    db = AsyncMock()
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def app(mock_coordinator, mock_inspector, mock_directory, mock_db):
    """App with every service dependency overridden."""
    app = create_app()
    app.dependency_overrides[get_coordinator] = lambda: mock_coordinator
    app.dependency_overrides[get_source_inspector] = lambda: mock_inspector
    app.dependency_overrides[get_directory_client] = lambda: mock_directory
    app.dependency_overrides[get_database] = lambda: mock_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """TestClient treated as a local caller."""
    app.dependency_overrides[require_local_client] = lambda: "127.0.0.1"
    with TestClient(app) as c:
        yield c


@pytest.fixture
def remote_client(app):
    """TestClient whose address is not trusted."""
    with TestClient(app) as c:
        yield c
