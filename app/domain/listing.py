"""
app/domain/listing.py

Domain models for marketplace listings and persisted result snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class SearchMode(str, Enum):
    """
    Accumulation mode for a search run.
    """

    REPLACE = "replace"
    APPEND = "append"

    @classmethod
    def parse(cls, value: str | SearchMode | None) -> SearchMode:
        if isinstance(value, SearchMode):
            return value
        normalized = (value or cls.REPLACE.value).strip().lower()
        try:
            return cls(normalized)
        except ValueError as exc:
            allowed = ", ".join(mode.value for mode in cls)
            raise ValueError(f"Unsupported mode '{value}'. Allowed modes: {allowed}.") from exc


@dataclass(frozen=True)
class ListingRecord:
    """
    One normalized marketplace result or search-link fallback.

    Records flagged ``is_search`` point at a generic search page; their
    price and year are placeholders, not listing data.
    """

    artist: str
    source: str
    link: str
    album: str = ""
    year: str = ""
    price: str = "Various"
    shipping: str | None = None
    condition: str = "Various"
    country: str = "Various"
    is_search: bool = False

    def __post_init__(self) -> None:
        for name in ("artist", "source", "link"):
            if not getattr(self, name):
                raise ValueError(f"ListingRecord.{name} must not be empty.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "artist": self.artist,
            "album": self.album,
            "year": self.year,
            "price": self.price,
            "shipping": self.shipping,
            "condition": self.condition,
            "country": self.country,
            "source": self.source,
            "link": self.link,
            "isSearch": self.is_search,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ListingRecord:
        year = payload.get("year")
        return cls(
            artist=str(payload["artist"]),
            source=str(payload["source"]),
            link=str(payload["link"]),
            album=str(payload.get("album") or ""),
            year="" if year is None else str(year),
            price=str(payload.get("price") or "Various"),
            shipping=payload.get("shipping"),
            condition=str(payload.get("condition") or "Various"),
            country=str(payload.get("country") or "Various"),
            is_search=bool(payload.get("isSearch", False)),
        )


def utc_timestamp() -> str:
    """
    Return the current UTC time as an ISO-8601 string.
    """

    return datetime.now(timezone.utc).isoformat()


@dataclass
class ResultSnapshot:
    """
    The single persisted accumulation of searched artists and their records.

    ``artists`` and ``results`` are ordered independently; results are not
    partitioned by artist.
    """

    artists: list[str] = field(default_factory=list)
    results: list[ListingRecord] = field(default_factory=list)
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "artists": list(self.artists),
            "results": [record.to_dict() for record in self.results],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ResultSnapshot:
        results: list[ListingRecord] = []
        for index, item in enumerate(payload.get("results") or []):
            try:
                if not isinstance(item, dict):
                    raise TypeError("record is not an object")
                results.append(ListingRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unreadable snapshot record index=%d error=%r", index, exc)
        return cls(
            artists=[str(artist) for artist in payload.get("artists") or []],
            results=results,
            timestamp=str(payload.get("timestamp") or utc_timestamp()),
        )


@dataclass(frozen=True)
class SearchRunOutcome:
    """
    Outcome of one merge-and-aggregate run.
    """

    mode: SearchMode
    artists: list[str]
    results: list[ListingRecord]
    searched_artists: list[str]
    empty_batch: bool = False
    snapshot: ResultSnapshot | None = None


def normalize_artist_names(names: Iterable[str | None]) -> list[str]:
    """
    Trim artist names and drop empty entries, keeping input order.
    """

    normalized: list[str] = []
    for name in names:
        if name is None:
            continue
        stripped = str(name).strip()
        if stripped:
            normalized.append(stripped)
    return normalized


def exclude_known_artists(names: Iterable[str], known: Iterable[str]) -> list[str]:
    """
    Return names not already present in ``known`` (case-insensitive).

    Repeats inside ``names`` are collapsed to their first occurrence.
    """

    seen = {artist.lower() for artist in known}
    novel: list[str] = []
    for name in names:
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        novel.append(name)
    return novel
