"""
app/repositories/snapshot_repository.py

JSON file persistence for the single result snapshot.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from app.domain.listing import ResultSnapshot
from app.errors import SnapshotPersistenceError

logger = logging.getLogger(__name__)

_LOCKS_GUARD = threading.Lock()
_WRITE_LOCKS: dict[Path, threading.RLock] = {}


def _write_lock_for(path: Path) -> threading.RLock:
    with _LOCKS_GUARD:
        lock = _WRITE_LOCKS.get(path)
        if lock is None:
            lock = threading.RLock()
            _WRITE_LOCKS[path] = lock
        return lock


class SnapshotRepository:
    """
    Loads and atomically replaces the persisted result snapshot.

    Writes go to a temporary file in the target directory which is then
    renamed over the snapshot, so readers only ever see a complete file.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path).resolve()
        self.write_lock = _write_lock_for(self._path)

    @property
    def path(self) -> Path:
        return self._path

    def load_snapshot(self) -> ResultSnapshot | None:
        """
        Return the stored snapshot, or ``None`` when none has been written.

        An existing file that cannot be read or parsed raises
        ``SnapshotPersistenceError`` so callers never overwrite it blindly.
        """

        if not self._path.exists():
            return None
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise ValueError("snapshot root is not an object")
            return ResultSnapshot.from_dict(payload)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.error("Unreadable snapshot path=%s error=%s", self._path, exc)
            raise SnapshotPersistenceError(f"Unable to read snapshot: {exc}") from exc

    def save_snapshot(self, snapshot: ResultSnapshot) -> None:
        body = json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)
        with self.write_lock:
            temp_path: str | None = None
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                fd, temp_path = tempfile.mkstemp(
                    dir=self._path.parent,
                    prefix=f".{self._path.name}.",
                    suffix=".tmp",
                )
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(body)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(temp_path, self._path)
                temp_path = None
            except OSError as exc:
                logger.exception("Failed to persist snapshot path=%s", self._path)
                raise SnapshotPersistenceError(f"Unable to write snapshot: {exc}") from exc
            finally:
                if temp_path is not None:
                    try:
                        os.unlink(temp_path)
                    except OSError:
                        logger.warning("Could not remove temporary snapshot file path=%s", temp_path)

        logger.info(
            "Saved snapshot artists=%d results=%d path=%s",
            len(snapshot.artists),
            len(snapshot.results),
            self._path,
        )
