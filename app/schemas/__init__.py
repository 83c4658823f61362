"""
app/schemas package marker.
"""

from app.schemas.search import (
    AddArtistsRequest,
    ListingRecordResponse,
    SearchResponse,
    SnapshotResponse,
    StatusResponse,
)

__all__ = [
    "AddArtistsRequest",
    "ListingRecordResponse",
    "SearchResponse",
    "SnapshotResponse",
    "StatusResponse",
]
