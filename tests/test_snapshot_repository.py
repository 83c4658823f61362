from __future__ import annotations

import json
from pathlib import Path

import pytest

from app.domain.listing import ListingRecord, ResultSnapshot
from app.errors import SnapshotPersistenceError
from app.repositories.snapshot_repository import SnapshotRepository


def _snapshot() -> ResultSnapshot:
    return ResultSnapshot(
        artists=["Portishead"],
        results=[
            ListingRecord(
                artist="Portishead",
                album="Dummy",
                year="1994",
                price="From $25",
                link="https://www.discogs.com/sell/release/1",
                source="Discogs",
            ),
            ListingRecord(
                artist="Portishead",
                album="[Search Amazon]",
                link="https://www.amazon.com/s?k=Portishead",
                source="Amazon",
                is_search=True,
            ),
        ],
        timestamp="2026-03-01T12:00:00+00:00",
    )


def test_missing_file_loads_as_none(tmp_path: Path) -> None:
    assert SnapshotRepository(tmp_path / "missing.json").load_snapshot() is None


def test_saved_snapshot_uses_wire_keys(tmp_path: Path) -> None:
    repository = SnapshotRepository(tmp_path / "data" / "last-results.json")

    repository.save_snapshot(_snapshot())

    payload = json.loads(repository.path.read_text(encoding="utf-8"))
    assert payload["timestamp"] == "2026-03-01T12:00:00+00:00"
    assert payload["artists"] == ["Portishead"]
    assert payload["results"][1]["isSearch"] is True
    assert payload["results"][0]["shipping"] is None
    assert repository.load_snapshot() == _snapshot()


def test_no_temporary_files_left_behind(tmp_path: Path) -> None:
    repository = SnapshotRepository(tmp_path / "last-results.json")

    repository.save_snapshot(_snapshot())
    repository.save_snapshot(_snapshot())

    assert [path.name for path in tmp_path.iterdir()] == ["last-results.json"]


def test_malformed_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "last-results.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SnapshotPersistenceError):
        SnapshotRepository(path).load_snapshot()


def test_unreadable_record_is_skipped_without_losing_the_rest(tmp_path: Path) -> None:
    path = tmp_path / "last-results.json"
    payload = _snapshot().to_dict()
    payload["results"].insert(1, {"artist": "Portishead", "album": "Third", "source": "eBay"})
    path.write_text(json.dumps(payload), encoding="utf-8")

    snapshot = SnapshotRepository(path).load_snapshot()

    assert snapshot is not None
    assert snapshot.artists == ["Portishead"]
    assert snapshot.results == _snapshot().results


def test_records_from_older_snapshots_fill_defaults(tmp_path: Path) -> None:
    path = tmp_path / "last-results.json"
    path.write_text(
        json.dumps(
            {
                "timestamp": "2025-12-01T00:00:00Z",
                "artists": ["Low"],
                "results": [
                    {
                        "artist": "Low",
                        "album": "[Search eBay]",
                        "price": "Various",
                        "link": "https://www.ebay.com/sch/i.html?_nkw=Low",
                        "source": "eBay",
                        "isSearch": True,
                    }
                ],
            }
        ),
        encoding="utf-8",
    )

    snapshot = SnapshotRepository(path).load_snapshot()

    assert snapshot is not None
    [record] = snapshot.results
    assert record.year == ""
    assert record.shipping is None
    assert record.condition == "Various"


def test_repositories_for_same_path_share_write_lock(tmp_path: Path) -> None:
    path = tmp_path / "last-results.json"

    assert SnapshotRepository(path).write_lock is SnapshotRepository(path).write_lock
