"""
app/schemas/search.py

Request and response schemas for vinyl search operations.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.listing import ListingRecord, ResultSnapshot, SearchRunOutcome


class ListingRecordResponse(BaseModel):
    """
    API shape of one listing record.
    """

    model_config = ConfigDict(populate_by_name=True)

    artist: str
    album: str
    year: str = ""
    price: str
    shipping: str | None = None
    condition: str
    country: str
    source: str
    link: str
    is_search: bool = Field(default=False, alias="isSearch")

    @classmethod
    def from_record(cls, record: ListingRecord) -> ListingRecordResponse:
        return cls.model_validate(record.to_dict())


class AddArtistsRequest(BaseModel):
    """
    Body for appending artists typed in by the user.
    """

    artists: list[str] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """
    Combined artists and results after a search run.
    """

    model_config = ConfigDict(populate_by_name=True)

    artists: list[str]
    results: list[ListingRecordResponse]
    searched: list[str] = Field(default_factory=list)
    empty_batch: bool = Field(default=False, alias="emptyBatch")

    @classmethod
    def from_outcome(cls, outcome: SearchRunOutcome) -> SearchResponse:
        return cls(
            artists=outcome.artists,
            results=[ListingRecordResponse.from_record(record) for record in outcome.results],
            searched=outcome.searched_artists,
            empty_batch=outcome.empty_batch,
        )


class SnapshotResponse(BaseModel):
    """
    The persisted snapshot as returned to clients.
    """

    timestamp: str
    artists: list[str]
    results: list[ListingRecordResponse]

    @classmethod
    def from_snapshot(cls, snapshot: ResultSnapshot) -> SnapshotResponse:
        return cls(
            timestamp=snapshot.timestamp,
            artists=snapshot.artists,
            results=[ListingRecordResponse.from_record(record) for record in snapshot.results],
        )


class StatusResponse(BaseModel):
    """
    Which upstream credentials are configured.
    """

    model_config = ConfigDict(populate_by_name=True)

    has_discogs_token: bool = Field(..., alias="hasDiscogsToken")
    has_ebay_credentials: bool = Field(..., alias="hasEbayCredentials")
    ebay_mode: str = Field(..., alias="ebayMode")
