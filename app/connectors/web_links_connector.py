"""
app/connectors/web_links_connector.py

Search-page links for marketplaces without an accessible API.
"""

from __future__ import annotations

from urllib.parse import quote

from app.connectors.base import SourceSearchResult
from app.domain.cancellation import CancellationToken
from app.domain.listing import ListingRecord

WEB_LINKS_SOURCE = "Web"
SEARCH_SUFFIX = "vinyl record"


class WebLinkSource:
    """
    Builds deep-linked search URLs; never touches the network.
    """

    source = WEB_LINKS_SOURCE

    def fetch_listings(
        self,
        artist: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SourceSearchResult:
        return SourceSearchResult.degraded(self.source, self._link_records(artist))

    def search(self, artist: str) -> list[ListingRecord]:
        return self._link_records(artist)

    @staticmethod
    def _link_records(artist: str) -> list[ListingRecord]:
        encoded_query = quote(f"{artist} {SEARCH_SUFFIX}", safe="")
        return [
            ListingRecord(
                artist=artist,
                album="[Search eBay]",
                price="Various",
                link=(
                    "https://www.ebay.com/sch/i.html"
                    f"?_nkw={encoded_query}&_sacat=176985&LH_ItemCondition=4"
                ),
                source="eBay",
                condition="Various",
                country="Various",
                year="",
                is_search=True,
            ),
            ListingRecord(
                artist=artist,
                album="[Search Amazon]",
                price="Various",
                link=f"https://www.amazon.com/s?k={encoded_query}&i=popular",
                source="Amazon",
                condition="Various",
                country="Various",
                year="",
                is_search=True,
            ),
        ]
