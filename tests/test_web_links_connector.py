from __future__ import annotations

from urllib.parse import quote

from app.connectors.base import SourceStatus
from app.connectors.web_links_connector import WebLinkSource


def test_returns_fixed_pair_of_search_links() -> None:
    result = WebLinkSource().fetch_listings("Sigur Rós")

    assert result.status is SourceStatus.DEGRADED
    ebay, amazon = result.records
    encoded = quote("Sigur Rós vinyl record", safe="")

    assert (ebay.source, ebay.album) == ("eBay", "[Search eBay]")
    assert ebay.link == (
        f"https://www.ebay.com/sch/i.html?_nkw={encoded}&_sacat=176985&LH_ItemCondition=4"
    )
    assert (amazon.source, amazon.album) == ("Amazon", "[Search Amazon]")
    assert amazon.link == f"https://www.amazon.com/s?k={encoded}&i=popular"
    assert all(record.is_search for record in result.records)
    assert all(record.artist == "Sigur Rós" for record in result.records)


def test_search_matches_fetch_listings() -> None:
    source = WebLinkSource()

    assert source.search("AC/DC") == source.fetch_listings("AC/DC").records
    assert "AC%2FDC" in source.search("AC/DC")[0].link
