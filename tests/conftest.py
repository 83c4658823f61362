"""
tests/conftest.py

Shared fakes for HTTP sessions, sleeping, and marketplace sources.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest
import requests

from app.config import ExternalHTTPSettings
from app.connectors.base import SourceSearchResult
from app.domain.cancellation import CancellationToken
from app.domain.listing import ListingRecord


def make_response(
    status_code: int = 200,
    payload: Any = None,
    url: str = "https://api.example.test/",
) -> requests.Response:
    """Build a real requests.Response with a JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"
    response._content = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return response


Handler = Callable[[str, str, dict[str, Any]], Any]


class FakeSession:
    """
    Stand-in for requests.Session that records calls and delegates to a handler.
    """

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        result = self._handler(method, url, kwargs)
        if isinstance(result, Exception):
            raise result
        return result

    def calls_to(self, fragment: str) -> list[dict[str, Any]]:
        return [call for call in self.calls if fragment in call["url"]]


class StubSource:
    """
    Source returning canned records and logging the artists it was asked about.
    """

    def __init__(self, source: str, *, per_artist: int = 1, log: list[tuple[str, str]] | None = None) -> None:
        self.source = source
        self._per_artist = per_artist
        self.log = log if log is not None else []

    def fetch_listings(
        self,
        artist: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> SourceSearchResult:
        self.log.append((self.source, artist))
        records = [
            ListingRecord(
                artist=artist,
                album=f"{self.source} album {index}",
                price="10.00 USD",
                link=f"https://{self.source.lower()}.example.test/{artist}/{index}",
                source=self.source,
            )
            for index in range(self._per_artist)
        ]
        return SourceSearchResult.ok(self.source, records)


@pytest.fixture()
def http_settings() -> ExternalHTTPSettings:
    return ExternalHTTPSettings(
        timeout_seconds=1.0,
        throttle_cooldown_seconds=60.0,
        max_throttle_retries=2,
        user_agent="VinylSearchTests/1.0",
    )


@pytest.fixture()
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Capture time.sleep calls made by pacing and cooldown waits."""
    recorded: list[float] = []
    monkeypatch.setattr("app.domain.cancellation.time.sleep", recorded.append)
    return recorded
