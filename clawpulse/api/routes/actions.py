"""
Agent-facing endpoints: action processing and source scraping.

Both endpoints are restricted to local callers.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from clawpulse.api.auth import require_local_client
from clawpulse.api.dependencies import get_coordinator, get_source_inspector
from clawpulse.api.models import (
    ActionRequest,
    ActionResponse,
    ErrorResponse,
    ScrapeRequest,
    ScrapeResponse,
    ScrapeResult,
)
from clawpulse.coordinator.service import ActionCoordinator
from clawpulse.inspector.service import SourceInspector

logger = structlog.get_logger(__name__)
router = APIRouter()

MAX_SCRAPE_URLS = 5


@router.post(
    "/api/action",
    response_model=ActionResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing from or action"},
        403: {"model": ErrorResponse, "description": "Caller is not local"},
    },
    summary="Process an agent action",
)
async def process_action(
    request: ActionRequest,
    _host: str = Depends(require_local_client),
    coordinator: ActionCoordinator = Depends(get_coordinator),
) -> ActionResponse:
    """
    Run one action through the coordinator.

    The response lists the notifications the caller must deliver. An
    action that was ignored still answers ``ok`` with no notifications.
    """
    if not request.from_agent or not request.action:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields: from, action",
        )

    result = await coordinator.process(
        request.from_agent,
        request.action,
        request.payload or {},
    )
    logger.info(
        "Action processed",
        action=request.action,
        from_agent=request.from_agent,
        outgoing=len(result.outgoing),
    )
    return ActionResponse(
        ok=True,
        outgoing=[n.to_dict() for n in result.outgoing],
        thread_id=result.thread_id,
    )


@router.post(
    "/api/scrape",
    response_model=ScrapeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Bad URL list"},
        403: {"model": ErrorResponse, "description": "Caller is not local"},
        500: {"model": ErrorResponse, "description": "Scraping failed"},
    },
    summary="Fetch and extract source pages",
)
async def scrape_sources(
    request: ScrapeRequest,
    _host: str = Depends(require_local_client),
    inspector: SourceInspector = Depends(get_source_inspector),
) -> ScrapeResponse:
    urls = request.urls
    if (
        not isinstance(urls, list)
        or not urls
        or not all(isinstance(u, str) for u in urls)
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required field: urls (string[])",
        )
    if len(urls) > MAX_SCRAPE_URLS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum {MAX_SCRAPE_URLS} URLs per request",
        )

    try:
        texts = await inspector.fetch(urls)
    except Exception as e:
        logger.error("Scrape failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Scraping failed",
        )

    return ScrapeResponse(
        results=[ScrapeResult(url=url, content=texts.get(url, "")) for url in urls]
    )
