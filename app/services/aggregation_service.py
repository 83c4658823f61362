"""
app/services/aggregation_service.py

Runs every marketplace source for each artist and concatenates the results.

Artists are processed strictly one after another; every source for one
artist finishes before the next artist starts. A fixed pacing delay follows
each artist on top of the per-source rate limiting, bounding the aggregate
request rate across a whole batch.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import lru_cache

import requests

from app.config import (
    get_aggregation_settings,
    get_discogs_settings,
    get_ebay_settings,
    get_external_http_settings,
)
from app.connectors import DiscogsSource, EbaySource, ListingSource, WebLinkSource
from app.domain.cancellation import CancellationToken, pause
from app.domain.listing import ListingRecord
from app.logging_utils import log_event

logger = logging.getLogger(__name__)


class MarketplaceAggregator:
    """
    Coordinates source invocation per artist and pacing between artists.
    """

    def __init__(
        self,
        *,
        sources: Sequence[ListingSource],
        artist_delay_seconds: float = 0.5,
    ) -> None:
        self._sources = list(sources)
        self._artist_delay_seconds = max(0.0, artist_delay_seconds)

    def aggregate_for_artist(
        self,
        artist: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> list[ListingRecord]:
        """
        Query each source in order and return their records in that order.
        """

        records: list[ListingRecord] = []
        for source in self._sources:
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            result = source.fetch_listings(artist, cancellation=cancellation)
            log_event(
                logger,
                logging.INFO,
                "source_search_completed",
                artist=artist,
                source=result.source,
                status=result.status.value,
                records=len(result.records),
                error=result.error,
            )
            records.extend(result.records)
        return records

    def aggregate(
        self,
        artists: Sequence[str],
        *,
        cancellation: CancellationToken | None = None,
    ) -> list[ListingRecord]:
        """
        Aggregate a batch of artists sequentially with pacing between them.
        """

        results: list[ListingRecord] = []
        for index, artist in enumerate(artists, start=1):
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            logger.info("Searching for artist=%s (%d/%d)", artist, index, len(artists))
            artist_records = self.aggregate_for_artist(artist, cancellation=cancellation)
            results.extend(artist_records)
            log_event(
                logger,
                logging.INFO,
                "artist_search_completed",
                artist=artist,
                records=len(artist_records),
            )
            pause(self._artist_delay_seconds, cancellation)
        return results


def build_default_sources(session: requests.Session | None = None) -> list[ListingSource]:
    """
    Build the Discogs, eBay, and web-link sources from environment settings.
    """

    http_settings = get_external_http_settings()
    shared_session = session or requests.Session()
    return [
        DiscogsSource(
            settings=get_discogs_settings(),
            http_settings=http_settings,
            session=shared_session,
        ),
        EbaySource(
            settings=get_ebay_settings(),
            http_settings=http_settings,
            session=shared_session,
        ),
        WebLinkSource(),
    ]


@lru_cache(maxsize=1)
def get_marketplace_aggregator() -> MarketplaceAggregator:
    """
    Build and cache the process-wide aggregator so limiter and token state persist.
    """

    return MarketplaceAggregator(
        sources=build_default_sources(),
        artist_delay_seconds=get_aggregation_settings().artist_delay_seconds,
    )
