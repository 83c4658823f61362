"""
app/connectors/discogs_connector.py

Discogs catalog source with marketplace linkage.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote, urlencode

import requests

from app.config import DiscogsSettings, ExternalHTTPSettings
from app.connectors.base import BaseMarketplaceSource, SourceSearchResult
from app.connectors.rate_limiter import HostRateLimiter
from app.domain.cancellation import CancellationToken
from app.domain.listing import ListingRecord
from app.errors import SearchCancelledError

logger = logging.getLogger(__name__)

DISCOGS_SOURCE = "Discogs"
DISCOGS_WEB_BASE = "https://www.discogs.com"
TITLE_SEPARATOR = " - "


def split_release_title(title: str, query_artist: str) -> tuple[str, str]:
    """
    Split a Discogs "Artist - Album" title on the first separator.

    Titles without the separator keep the query artist and the whole title.
    """

    if TITLE_SEPARATOR in title:
        artist, album = title.split(TITLE_SEPARATOR, 1)
        return artist, album
    return query_artist, title


def discogs_search_link(artist: str) -> str:
    query = urlencode({"q": artist, "type": "release", "format_exact": "Vinyl"}, quote_via=quote)
    return f"{DISCOGS_WEB_BASE}/search/?{query}"


def discogs_sell_link(release_id: Any) -> str:
    return f"{DISCOGS_WEB_BASE}/sell/release/{release_id}"


class DiscogsSource(BaseMarketplaceSource):
    """
    Searches Discogs vinyl releases and reports marketplace availability.
    """

    def __init__(
        self,
        *,
        settings: DiscogsSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        rate_limiter: HostRateLimiter | None = None,
    ) -> None:
        super().__init__(
            source=DISCOGS_SOURCE,
            http_settings=http_settings,
            session=session,
            rate_limiter=rate_limiter
            or HostRateLimiter(min_interval_seconds=settings.min_request_interval_seconds),
            host_class="discogs",
        )
        self._settings = settings

    def _search(
        self,
        artist: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SourceSearchResult:
        if not self._settings.token:
            logger.info("No DISCOGS_TOKEN set; returning marketplace search link artist=%s", artist)
            return SourceSearchResult.degraded(self.source, [self._search_link_record(artist)])

        payload = self._request_json(
            method="GET",
            url=f"{self._settings.base_url}/database/search",
            params={
                "artist": artist,
                "format": "Vinyl",
                "type": "release",
                "per_page": self._settings.per_page,
            },
            headers=self._auth_headers(),
            cancellation=cancellation,
        )
        releases = payload.get("results") if isinstance(payload, dict) else None
        if not releases:
            logger.info("No Discogs results artist=%s", artist)
            return SourceSearchResult.empty(self.source)

        logger.info("Found %d Discogs releases artist=%s", len(releases), artist)
        records: list[ListingRecord] = []
        for release in releases[: self._settings.max_releases]:
            if not isinstance(release, dict) or release.get("id") is None:
                continue
            records.append(self._release_record(release, artist, cancellation=cancellation))
        return SourceSearchResult.ok(self.source, records)

    def _release_record(
        self,
        release: dict[str, Any],
        query_artist: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> ListingRecord:
        release_id = release["id"]
        album_artist, album = split_release_title(str(release.get("title") or ""), query_artist)

        try:
            detail = self._request_json(
                method="GET",
                url=f"{self._settings.base_url}/releases/{release_id}",
                headers=self._auth_headers(),
                cancellation=cancellation,
            )
            if not isinstance(detail, dict):
                raise ValueError("release detail payload is not an object")
        except SearchCancelledError:
            raise
        except Exception as exc:
            logger.warning("Failed to fetch Discogs release id=%s error=%s", release_id, exc)
            return ListingRecord(
                artist=album_artist,
                album=album,
                price="See listings",
                link=discogs_sell_link(release_id),
                source=self.source,
                condition="Various",
                country="Various",
                year=_year(release.get("year")),
            )

        num_for_sale = _to_int(detail.get("num_for_sale"))
        year = _year(detail.get("year"))
        if num_for_sale > 0:
            lowest_price = detail.get("lowest_price")
            return ListingRecord(
                artist=album_artist,
                album=album,
                price=f"From ${lowest_price}" if lowest_price else f"{num_for_sale} for sale",
                shipping=None,
                link=discogs_sell_link(release_id),
                source=self.source,
                condition="Various",
                country="Various",
                year=year,
            )

        uri = release.get("uri") or f"/release/{release_id}"
        return ListingRecord(
            artist=album_artist,
            album=album,
            price="No listings",
            link=f"{DISCOGS_WEB_BASE}{uri}",
            source=self.source,
            condition="N/A",
            country="N/A",
            year=year,
        )

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Discogs token={self._settings.token}"}

    def _search_link_record(self, artist: str) -> ListingRecord:
        return ListingRecord(
            artist=artist,
            album="Browse Vinyl on Discogs",
            price="Various",
            link=discogs_search_link(artist),
            source=self.source,
            condition="Various",
            country="Various",
            year="",
            is_search=True,
        )


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _year(value: Any) -> str:
    if value in (None, 0, "0"):
        return ""
    return str(value)
