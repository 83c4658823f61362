"""
app/api/routers/results_router.py

Stored results and configuration status endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.config import get_discogs_settings, get_ebay_settings
from app.errors import SnapshotPersistenceError
from app.schemas.search import SnapshotResponse, StatusResponse
from app.services.search_service import SearchService, get_search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["results"])


@router.get("/results/latest", response_model=SnapshotResponse)
def latest_results(
    search_service: SearchService = Depends(get_search_service),
) -> SnapshotResponse:
    try:
        snapshot = search_service.latest_snapshot()
    except SnapshotPersistenceError as exc:
        logger.error("Latest results error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Could not load results: {exc}",
        ) from exc
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No previous results found",
        )
    return SnapshotResponse.from_snapshot(snapshot)


@router.get("/status", response_model=StatusResponse)
def configuration_status() -> StatusResponse:
    ebay = get_ebay_settings()
    return StatusResponse(
        has_discogs_token=bool(get_discogs_settings().token),
        has_ebay_credentials=ebay.has_credentials,
        ebay_mode=ebay.mode,
    )
