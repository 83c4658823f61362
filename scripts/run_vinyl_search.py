"""
Run a vinyl marketplace search from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from app.config import get_aggregation_settings
from app.domain.cancellation import CancellationToken
from app.domain.listing import SearchMode
from app.errors import EmptyArtistBatchError, SearchCancelledError, SnapshotPersistenceError
from app.services.artist_csv_parser import parse_artist_csv
from app.services.search_service import get_search_service


def main() -> int:
    parser = argparse.ArgumentParser(description="Search vinyl marketplaces for a list of artists.")
    parser.add_argument("artists", nargs="*", help="Artist names to search.")
    parser.add_argument(
        "--csv",
        dest="csv_path",
        type=Path,
        default=None,
        help="Optional CSV file with an artist column.",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in SearchMode],
        default=SearchMode.REPLACE.value,
        help="Replace stored results or append new artists to them.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    artists = list(args.artists)
    if args.csv_path is not None:
        artists.extend(parse_artist_csv(args.csv_path.read_bytes()))

    cancellation = CancellationToken(timeout_seconds=get_aggregation_settings().run_timeout_seconds)
    try:
        outcome = get_search_service().search_and_persist(artists, args.mode, cancellation=cancellation)
    except EmptyArtistBatchError as exc:
        parser.error(str(exc))
    except (KeyboardInterrupt, SearchCancelledError):
        cancellation.cancel()
        print(json.dumps({"status": "cancelled"}))
        return 130
    except SnapshotPersistenceError as exc:
        print(json.dumps({"status": "failed", "error": str(exc)}))
        return 1

    payload = {
        "mode": outcome.mode.value,
        "searched": outcome.searched_artists,
        "empty_batch": outcome.empty_batch,
        "artists": len(outcome.artists),
        "results": len(outcome.results),
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
