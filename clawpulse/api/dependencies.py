"""
Dependency injection for FastAPI endpoints.
"""

from clawpulse.coordinator.service import ActionCoordinator
from clawpulse.credibility.config import CredibilityConfig
from clawpulse.credibility.oracle import CredibilityOracle
from clawpulse.directory.client import AgentDirectoryClient
from clawpulse.feed.config import FeedConfig
from clawpulse.feed.repository import FeedRepository
from clawpulse.inspector.config import InspectorConfig
from clawpulse.inspector.service import SourceInspector
from clawpulse.storage.database import Database
from clawpulse.validation.validator import StoryValidator

# Global service instances (initialized on first request)
_database: Database | None = None
_feed_repository: FeedRepository | None = None
_inspector: SourceInspector | None = None
_oracle: CredibilityOracle | None = None
_coordinator: ActionCoordinator | None = None
_directory: AgentDirectoryClient | None = None
_feed_config: FeedConfig | None = None


def get_feed_config() -> FeedConfig:
    """Get the feed configuration (category set, paging defaults)."""
    global _feed_config

    if _feed_config is None:
        _feed_config = FeedConfig()
    return _feed_config


async def get_database() -> Database:
    """Get the connected database instance."""
    global _database

    if _database is None:
        _database = Database()
        await _database.connect()
    return _database


async def get_feed_repository() -> FeedRepository:
    """Get feed repository instance."""
    global _feed_repository

    if _feed_repository is None:
        database = await get_database()
        _feed_repository = FeedRepository(database)
    return _feed_repository


def get_source_inspector() -> SourceInspector:
    """Get source inspector instance."""
    global _inspector

    if _inspector is None:
        _inspector = SourceInspector(InspectorConfig())
    return _inspector


async def get_coordinator() -> ActionCoordinator:
    """
    Get action coordinator instance.

    Wires repository, inspector, oracle and validator on first use.
    """
    global _coordinator, _oracle

    if _coordinator is None:
        feed_config = get_feed_config()
        repository = await get_feed_repository()

        if _oracle is None:
            _oracle = CredibilityOracle(CredibilityConfig())

        validator = StoryValidator(
            inspector=get_source_inspector(),
            oracle=_oracle,
            feed_config=feed_config,
        )
        _coordinator = ActionCoordinator(
            repository=repository,
            validator=validator,
            feed_config=feed_config,
        )
    return _coordinator


async def get_directory_client() -> AgentDirectoryClient:
    """Get agent directory client instance."""
    global _directory

    if _directory is None:
        _directory = AgentDirectoryClient()
    return _directory


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _database, _feed_repository, _inspector, _oracle, _coordinator, _directory

    _coordinator = None
    _feed_repository = None
    _inspector = None

    if _oracle is not None:
        await _oracle.close()
        _oracle = None

    if _directory is not None:
        await _directory.close()
        _directory = None

    if _database is not None:
        await _database.close()
        _database = None
