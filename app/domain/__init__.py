"""
app/domain package marker.
"""

from app.domain.cancellation import CancellationToken
from app.domain.listing import (
    ListingRecord,
    ResultSnapshot,
    SearchMode,
    SearchRunOutcome,
    exclude_known_artists,
    normalize_artist_names,
)

__all__ = [
    "CancellationToken",
    "ListingRecord",
    "ResultSnapshot",
    "SearchMode",
    "SearchRunOutcome",
    "exclude_known_artists",
    "normalize_artist_names",
]
