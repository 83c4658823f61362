"""
app/connectors package marker.
"""

from app.connectors.base import (
    BaseMarketplaceSource,
    ListingSource,
    SourceSearchResult,
    SourceStatus,
)
from app.connectors.discogs_connector import DiscogsSource
from app.connectors.ebay_connector import EbaySource
from app.connectors.rate_limiter import HostRateLimiter
from app.connectors.token_cache import CachedToken, ClientCredentialsTokenCache
from app.connectors.web_links_connector import WebLinkSource

__all__ = [
    "BaseMarketplaceSource",
    "CachedToken",
    "ClientCredentialsTokenCache",
    "DiscogsSource",
    "EbaySource",
    "HostRateLimiter",
    "ListingSource",
    "SourceSearchResult",
    "SourceStatus",
    "WebLinkSource",
]
