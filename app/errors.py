"""
app/errors.py

Shared exceptions for marketplace search, aggregation, and persistence.
"""

from __future__ import annotations


class VinylSearchError(Exception):
    """Base exception for vinyl search failures."""


class ConfigurationError(VinylSearchError):
    """Raised when a source is missing the credentials it needs."""


class SourceRequestError(VinylSearchError):
    """
    Raised when an upstream request fails or returns an unusable payload.
    """


class SourceThrottledError(SourceRequestError):
    """Raised when an upstream keeps throttling after the retry budget is spent."""


class SearchCancelledError(VinylSearchError):
    """Raised when a run is cancelled or its deadline passes."""


class EmptyArtistBatchError(VinylSearchError, ValueError):
    """Raised when a request carries no artists to search."""


class SnapshotPersistenceError(VinylSearchError):
    """Raised when the result snapshot cannot be written."""
