"""
app/repositories package marker.
"""

from app.repositories.snapshot_repository import SnapshotRepository

__all__ = [
    "SnapshotRepository",
]
