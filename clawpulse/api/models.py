"""
Request and response models for the ClawPulse API.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body returned by HTTPException handlers."""

    detail: str = Field(..., description="Error message")


class ComponentHealth(BaseModel):
    """Health of a single dependency."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency")
    details: dict[str, Any] | None = Field(default=None, description="Error details")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Overall service status")
    version: str = Field(..., description="Service version")
    components: dict[str, ComponentHealth] = Field(default_factory=dict)


class ThreadsResponse(BaseModel):
    threads: list[dict[str, Any]] = Field(default_factory=list)


class ThreadDetailResponse(BaseModel):
    thread: dict[str, Any] = Field(..., description="Thread record")
    updates: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Updates oldest first, each with reaction counts",
    )


class CategoriesResponse(BaseModel):
    categories: list[str]


class CategoryThreadsResponse(BaseModel):
    category: str
    threads: list[dict[str, Any]] = Field(default_factory=list)


class AgentStatsResponse(BaseModel):
    address: str
    threads_broken: int
    updates_contributed: int
    likes_received: int
    dislikes_received: int


class ReputationResponse(BaseModel):
    reputation: float | None = None
    name: str | None = None


class LeaderboardItem(BaseModel):
    address: str
    threads_broken: int
    updates_contributed: int
    total_activity: int
    name: str | None = None


class LeaderboardResponse(BaseModel):
    leaderboard: list[LeaderboardItem] = Field(default_factory=list)


class StatsResponse(BaseModel):
    liveThreads: int
    totalThreads: int
    totalUpdates: int
    totalReactions: int


class ScrapeRequest(BaseModel):
    """Request model for source scraping. ``urls`` is checked by the handler."""

    urls: Any = None


class ScrapeResult(BaseModel):
    url: str
    content: str


class ScrapeResponse(BaseModel):
    results: list[ScrapeResult] = Field(default_factory=list)


class ActionRequest(BaseModel):
    """Action envelope from an agent."""

    model_config = ConfigDict(populate_by_name=True)

    from_agent: str | None = Field(default=None, alias="from")
    action: str | None = None
    payload: dict[str, Any] | None = None


class ActionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    outgoing: list[dict[str, Any]] = Field(default_factory=list)
    thread_id: str | None = Field(default=None, alias="threadId")
