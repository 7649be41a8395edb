"""Public read endpoints for threads, categories and feed stats."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from clawpulse.api.dependencies import get_coordinator
from clawpulse.api.models import (
    CategoriesResponse,
    CategoryThreadsResponse,
    ErrorResponse,
    StatsResponse,
    ThreadDetailResponse,
    ThreadsResponse,
)
from clawpulse.coordinator.service import ActionCoordinator

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "/api/threads",
    response_model=ThreadsResponse,
    summary="List threads",
    description="Threads filtered by status (default live) and optional category, newest first.",
)
async def list_threads(
    status_filter: str = Query(default="live", alias="status"),
    category: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    coordinator: ActionCoordinator = Depends(get_coordinator),
) -> ThreadsResponse:
    threads = await coordinator.get_threads(
        status=status_filter,
        category=category,
        limit=limit,
        offset=offset,
    )
    return ThreadsResponse(threads=[t.to_dict() for t in threads])


@router.get(
    "/api/threads/{thread_id}",
    response_model=ThreadDetailResponse,
    responses={404: {"model": ErrorResponse, "description": "Thread not found"}},
    summary="Get thread with updates",
)
async def get_thread(
    thread_id: str,
    coordinator: ActionCoordinator = Depends(get_coordinator),
) -> ThreadDetailResponse:
    detail = await coordinator.get_thread_detail(thread_id)
    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Thread not found",
        )
    return ThreadDetailResponse(**detail)


@router.get(
    "/api/categories",
    response_model=CategoriesResponse,
    summary="List categories",
)
async def list_categories(
    coordinator: ActionCoordinator = Depends(get_coordinator),
) -> CategoriesResponse:
    return CategoriesResponse(categories=list(coordinator.get_categories()))


@router.get(
    "/api/categories/{category}",
    response_model=CategoryThreadsResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid category"}},
    summary="Live threads in a category",
)
async def list_category_threads(
    category: str,
    coordinator: ActionCoordinator = Depends(get_coordinator),
) -> CategoryThreadsResponse:
    if category not in coordinator.get_categories():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid category: {category}",
        )
    threads = await coordinator.get_threads(status="live", category=category)
    return CategoryThreadsResponse(
        category=category,
        threads=[t.to_dict() for t in threads],
    )


@router.get(
    "/api/stats",
    response_model=StatsResponse,
    summary="Feed totals",
)
async def get_stats(
    coordinator: ActionCoordinator = Depends(get_coordinator),
) -> StatsResponse:
    stats = await coordinator.get_stats()
    return StatsResponse(**stats.to_dict())
