"""
app/services/search_service.py

Merge-and-persist orchestration for vinyl searches.

Replace mode discards the prior snapshot. Append mode searches only artists
missing from the prior snapshot (case-insensitive) and concatenates prior
content ahead of the new results.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import lru_cache

from app.config import get_snapshot_settings
from app.domain.cancellation import CancellationToken
from app.domain.listing import (
    ListingRecord,
    ResultSnapshot,
    SearchMode,
    SearchRunOutcome,
    exclude_known_artists,
    normalize_artist_names,
)
from app.errors import EmptyArtistBatchError
from app.repositories.snapshot_repository import SnapshotRepository
from app.services.aggregation_service import MarketplaceAggregator, get_marketplace_aggregator

logger = logging.getLogger(__name__)


class SearchService:
    """
    Coordinates artist filtering, aggregation, and snapshot persistence.
    """

    def __init__(
        self,
        *,
        aggregator: MarketplaceAggregator,
        repository: SnapshotRepository,
    ) -> None:
        self._aggregator = aggregator
        self._repository = repository

    def run_search(
        self,
        artist_names: Sequence[str],
        mode: SearchMode | str,
        prior_snapshot: ResultSnapshot | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SearchRunOutcome:
        """
        Aggregate the artists to search and combine them with the prior snapshot.

        Storage is not touched here; the returned outcome carries the
        snapshot to persist, or ``empty_batch`` when nothing was novel.
        """

        search_mode = SearchMode.parse(mode)
        artists = normalize_artist_names(artist_names)
        if not artists:
            raise EmptyArtistBatchError("No artists provided.")

        if search_mode is SearchMode.REPLACE:
            to_search = artists
            prior_artists: list[str] = []
            prior_results: list[ListingRecord] = []
        else:
            prior_artists = list(prior_snapshot.artists) if prior_snapshot else []
            prior_results = list(prior_snapshot.results) if prior_snapshot else []
            to_search = exclude_known_artists(artists, prior_artists)

        logger.info(
            "Search run mode=%s requested=%d to_search=%d",
            search_mode.value,
            len(artists),
            len(to_search),
        )

        if not to_search:
            return SearchRunOutcome(
                mode=search_mode,
                artists=prior_artists,
                results=prior_results,
                searched_artists=[],
                empty_batch=True,
                snapshot=None,
            )

        new_results = self._aggregator.aggregate(to_search, cancellation=cancellation)
        snapshot = ResultSnapshot(
            artists=[*prior_artists, *to_search],
            results=[*prior_results, *new_results],
        )
        return SearchRunOutcome(
            mode=search_mode,
            artists=snapshot.artists,
            results=snapshot.results,
            searched_artists=list(to_search),
            empty_batch=False,
            snapshot=snapshot,
        )

    def search_and_persist(
        self,
        artist_names: Sequence[str],
        mode: SearchMode | str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SearchRunOutcome:
        """
        Load, merge, and save under the repository write lock.

        Holding the lock across the whole sequence keeps the append-mode
        exclusion check and the commit atomic against other writers.
        """

        search_mode = SearchMode.parse(mode)
        with self._repository.write_lock:
            prior = self._repository.load_snapshot() if search_mode is SearchMode.APPEND else None
            outcome = self.run_search(
                artist_names,
                search_mode,
                prior,
                cancellation=cancellation,
            )
            if outcome.snapshot is not None:
                self._repository.save_snapshot(outcome.snapshot)
            else:
                logger.info("No new artists to search; snapshot left unchanged")
        return outcome

    def add_artists(
        self,
        artist_names: Sequence[str],
        *,
        cancellation: CancellationToken | None = None,
    ) -> SearchRunOutcome:
        """
        Append new artists, treating an all-known batch as a client error.
        """

        outcome = self.search_and_persist(artist_names, SearchMode.APPEND, cancellation=cancellation)
        if outcome.empty_batch:
            raise EmptyArtistBatchError("All artists already in list")
        return outcome

    def latest_snapshot(self) -> ResultSnapshot | None:
        return self._repository.load_snapshot()


@lru_cache(maxsize=1)
def get_search_service() -> SearchService:
    """
    Build and cache the search service.
    """

    return SearchService(
        aggregator=get_marketplace_aggregator(),
        repository=SnapshotRepository(get_snapshot_settings().snapshot_path),
    )
