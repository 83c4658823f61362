"""
app/connectors/ebay_connector.py

eBay Browse API source for direct vinyl listings.
"""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import quote, urlencode

import requests

from app.config import EbaySettings, ExternalHTTPSettings
from app.connectors.base import BaseMarketplaceSource, SourceSearchResult
from app.connectors.rate_limiter import HostRateLimiter
from app.connectors.token_cache import ClientCredentialsTokenCache
from app.domain.cancellation import CancellationToken
from app.domain.listing import ListingRecord
from app.errors import ConfigurationError, SourceRequestError

logger = logging.getLogger(__name__)

EBAY_SOURCE = "eBay"
EBAY_WEB_SEARCH_URL = "https://www.ebay.com/sch/i.html"
EBAY_OAUTH_SCOPE = "https://api.ebay.com/oauth/api_scope"
SEARCH_SUFFIX = "vinyl record"

_TITLE_NOISE_PATTERN = re.compile(
    r"\b(?:vinyl|record|lp|album|new|sealed|rare|original|pressing)\b",
    re.IGNORECASE,
)
_WHITESPACE_PATTERN = re.compile(r"\s+")


def clean_listing_title(title: str) -> str:
    """
    Strip format and condition noise words from a listing title.
    """

    stripped = _TITLE_NOISE_PATTERN.sub(" ", title)
    return _WHITESPACE_PATTERN.sub(" ", stripped).strip()


def format_amount(amount: Any) -> str | None:
    """
    Render an eBay ``{value, currency}`` amount as "<value> <currency>".
    """

    if not isinstance(amount, dict) or amount.get("value") in (None, ""):
        return None
    currency = amount.get("currency") or ""
    return f"{amount['value']} {currency}".strip()


def ebay_search_link(artist: str, category_id: str = "176985") -> str:
    query = urlencode(
        {"_nkw": f"{artist} {SEARCH_SUFFIX}", "_sacat": category_id},
        quote_via=quote,
    )
    return f"{EBAY_WEB_SEARCH_URL}?{query}"


class EbaySource(BaseMarketplaceSource):
    """
    Searches the eBay records category with an application token.
    """

    def __init__(
        self,
        *,
        settings: EbaySettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        rate_limiter: HostRateLimiter | None = None,
        token_cache: ClientCredentialsTokenCache | None = None,
    ) -> None:
        super().__init__(
            source=EBAY_SOURCE,
            http_settings=http_settings,
            session=session,
            rate_limiter=rate_limiter,
            host_class="ebay",
        )
        self._settings = settings
        self._token_cache = token_cache or ClientCredentialsTokenCache(
            fetch_token=self._exchange_credentials,
            buffer_seconds=settings.token_buffer_seconds,
        )

    def _search(
        self,
        artist: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SourceSearchResult:
        if not self._settings.client_id:
            logger.info("No EBAY_CLIENT_ID set; returning search link artist=%s", artist)
            return SourceSearchResult.degraded(self.source, [self._search_link_record(artist)])

        token = self._token_cache.get_access_token(cancellation)
        payload = self._request_json(
            method="GET",
            url=f"{self._settings.api_base}/buy/browse/v1/item_summary/search",
            params={
                "q": f"{artist} {SEARCH_SUFFIX}",
                "category_ids": self._settings.category_id,
                "limit": self._settings.search_limit,
                "fieldgroups": "EXTENDED,MATCHING_ITEMS",
            },
            headers={
                "Authorization": f"Bearer {token}",
                "X-EBAY-C-MARKETPLACE-ID": self._settings.marketplace_id,
            },
            cancellation=cancellation,
        )

        items = payload.get("itemSummaries") if isinstance(payload, dict) else None
        if not items:
            logger.info("No eBay results artist=%s", artist)
            return SourceSearchResult.empty(self.source)

        logger.info("Found %d eBay listings artist=%s", len(items), artist)
        records = [
            record
            for record in (self._item_record(item, artist) for item in items)
            if record is not None
        ]
        return SourceSearchResult.ok(self.source, records)

    def _on_failure(self, artist: str, exc: Exception) -> SourceSearchResult:
        return SourceSearchResult.degraded(
            self.source,
            [self._search_link_record(artist)],
            error=str(exc),
        )

    def _exchange_credentials(self, cancellation: CancellationToken | None = None) -> tuple[str, float]:
        """
        Trade client id and secret for an application bearer token.
        """

        client_id = self._settings.client_id
        client_secret = self._settings.client_secret
        if not client_id or not client_secret:
            raise ConfigurationError("eBay credentials not configured.")

        payload = self._request_json(
            method="POST",
            url=f"{self._settings.api_base}/identity/v1/oauth2/token",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            data={"grant_type": "client_credentials", "scope": EBAY_OAUTH_SCOPE},
            auth=(client_id, client_secret),
            cancellation=cancellation,
        )
        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise SourceRequestError("eBay token response did not include an access token.")
        try:
            expires_in = float(payload.get("expires_in") or 0)
        except (TypeError, ValueError):
            expires_in = 0.0
        return str(access_token), expires_in

    def _item_record(self, item: Any, artist: str) -> ListingRecord | None:
        if not isinstance(item, dict) or not item.get("itemWebUrl"):
            return None

        shipping_options = item.get("shippingOptions") or []
        first_option = shipping_options[0] if shipping_options and isinstance(shipping_options[0], dict) else {}
        location = item.get("itemLocation") if isinstance(item.get("itemLocation"), dict) else {}

        return ListingRecord(
            artist=artist,
            album=clean_listing_title(str(item.get("title") or "")),
            price=format_amount(item.get("price")) or "See listing",
            shipping=format_amount(first_option.get("shippingCost")),
            link=str(item["itemWebUrl"]),
            source=self.source,
            condition=item.get("condition") or "See listing",
            country=location.get("country") or "Unknown",
            year="",
        )

    def _search_link_record(self, artist: str) -> ListingRecord:
        return ListingRecord(
            artist=artist,
            album="Browse Vinyl on eBay",
            price="Various",
            link=ebay_search_link(artist, self._settings.category_id),
            source=self.source,
            condition="Various",
            country="Various",
            year="",
            is_search=True,
        )
