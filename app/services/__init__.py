"""
app/services package marker.
"""

from app.services.aggregation_service import (
    MarketplaceAggregator,
    build_default_sources,
    get_marketplace_aggregator,
)
from app.services.artist_csv_parser import ArtistCSVError, parse_artist_csv
from app.services.search_service import SearchService, get_search_service

__all__ = [
    "ArtistCSVError",
    "MarketplaceAggregator",
    "SearchService",
    "build_default_sources",
    "get_marketplace_aggregator",
    "get_search_service",
    "parse_artist_csv",
]
