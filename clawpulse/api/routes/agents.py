"""Agent stats, reputation and leaderboard endpoints."""

import structlog
from fastapi import APIRouter, Depends, Query

from clawpulse.api.dependencies import get_coordinator, get_directory_client
from clawpulse.api.models import (
    AgentStatsResponse,
    LeaderboardItem,
    LeaderboardResponse,
    ReputationResponse,
)
from clawpulse.coordinator.service import ActionCoordinator
from clawpulse.directory.client import AgentDirectoryClient

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "/api/agents/{address}",
    response_model=AgentStatsResponse,
    summary="Agent activity stats",
)
async def get_agent_stats(
    address: str,
    coordinator: ActionCoordinator = Depends(get_coordinator),
) -> AgentStatsResponse:
    stats = await coordinator.get_agent_stats(address)
    return AgentStatsResponse(**stats.to_dict())


@router.get(
    "/api/agents/{address}/reputation",
    response_model=ReputationResponse,
    summary="Agent reputation from the directory",
)
async def get_agent_reputation(
    address: str,
    directory: AgentDirectoryClient = Depends(get_directory_client),
) -> ReputationResponse:
    profile = await directory.get_agent(address)
    if profile is None:
        return ReputationResponse()
    return ReputationResponse(reputation=profile.reputation, name=profile.name)


@router.get(
    "/api/leaderboard",
    response_model=LeaderboardResponse,
    summary="Most active agents",
    description="Agents ranked by threads broken plus updates contributed, with directory names.",
)
async def get_leaderboard(
    limit: int = Query(default=20, ge=1, le=500),
    coordinator: ActionCoordinator = Depends(get_coordinator),
    directory: AgentDirectoryClient = Depends(get_directory_client),
) -> LeaderboardResponse:
    entries = await coordinator.get_leaderboard(limit)
    names = await directory.get_names([e.address for e in entries])

    return LeaderboardResponse(
        leaderboard=[
            LeaderboardItem(**entry.to_dict(), name=names.get(entry.address))
            for entry in entries
        ]
    )
