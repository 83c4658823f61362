"""
tests/test_run_vinyl_search.py

Command-line entry point: argument handling and exit codes.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from app.repositories.snapshot_repository import SnapshotRepository
from app.services.aggregation_service import MarketplaceAggregator
from app.services.search_service import SearchService
from scripts import run_vinyl_search
from tests.conftest import StubSource


@pytest.fixture()
def repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> SnapshotRepository:
    repository = SnapshotRepository(tmp_path / "last-results.json")
    service = SearchService(
        aggregator=MarketplaceAggregator(sources=[StubSource("Discogs")], artist_delay_seconds=0.0),
        repository=repository,
    )
    monkeypatch.setattr(run_vinyl_search, "get_search_service", lambda: service)
    return repository


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr("sys.argv", ["run_vinyl_search.py", *argv])
    return run_vinyl_search.main()


def test_artists_and_csv_are_searched_and_saved(
    repository: SnapshotRepository,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    csv_path = tmp_path / "artists.csv"
    csv_path.write_text("artist\nFaust\n", encoding="utf-8")

    exit_code = _run(monkeypatch, "Can", "--csv", str(csv_path))

    summary = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert summary["searched"] == ["Can", "Faust"]
    assert summary["mode"] == "replace"
    stored = repository.load_snapshot()
    assert stored is not None
    assert stored.artists == ["Can", "Faust"]


def test_append_of_known_artists_reports_empty_batch(
    repository: SnapshotRepository,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _run(monkeypatch, "Can")
    capsys.readouterr()

    exit_code = _run(monkeypatch, "--mode", "append", "can")

    summary = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert summary["empty_batch"] is True
    assert summary["searched"] == []


def test_no_artists_is_a_usage_error(
    repository: SnapshotRepository,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch)

    assert excinfo.value.code == 2


def test_unreadable_snapshot_exits_nonzero(
    repository: SnapshotRepository,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    repository.path.write_text("{not json", encoding="utf-8")

    exit_code = _run(monkeypatch, "--mode", "append", "Can")

    assert exit_code == 1
    assert json.loads(capsys.readouterr().out)["status"] == "failed"
