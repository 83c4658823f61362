"""
app/api/routers/search_router.py

Vinyl search HTTP endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile, status

from app.api.dependencies import get_cancellation_token, get_csv_upload
from app.domain.cancellation import CancellationToken
from app.domain.listing import SearchMode
from app.errors import EmptyArtistBatchError, SearchCancelledError, SnapshotPersistenceError
from app.schemas.search import AddArtistsRequest, SearchResponse
from app.services.artist_csv_parser import ArtistCSVError, parse_artist_csv
from app.services.search_service import SearchService, get_search_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["search"])


@router.post("/search", response_model=SearchResponse)
def search_from_csv(
    file: UploadFile = Depends(get_csv_upload),
    mode: str = Form(default=SearchMode.REPLACE.value),
    cancellation: CancellationToken = Depends(get_cancellation_token),
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Search every artist in an uploaded CSV, replacing or appending results.
    """

    try:
        search_mode = SearchMode.parse(mode)
        artists = parse_artist_csv(file.file.read())
    except (ValueError, ArtistCSVError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    finally:
        file.file.close()

    if not artists:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No artists found in CSV",
        )

    try:
        outcome = search_service.search_and_persist(artists, search_mode, cancellation=cancellation)
    except EmptyArtistBatchError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SearchCancelledError as exc:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc)) from exc
    except SnapshotPersistenceError as exc:
        logger.error("Search error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Search failed: {exc}",
        ) from exc

    return SearchResponse.from_outcome(outcome)


@router.post("/search/artists", response_model=SearchResponse)
def add_artists(
    payload: AddArtistsRequest,
    cancellation: CancellationToken = Depends(get_cancellation_token),
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Append artists not already in the stored results and search them.
    """

    if not payload.artists:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Artists array required",
        )

    try:
        outcome = search_service.add_artists(payload.artists, cancellation=cancellation)
    except EmptyArtistBatchError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SearchCancelledError as exc:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc)) from exc
    except SnapshotPersistenceError as exc:
        logger.error("Artists search error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Search failed: {exc}",
        ) from exc

    return SearchResponse.from_outcome(outcome)
