"""Input adapters that turn exported score sheets into evaluation snapshots."""

from .snapshots import (
    SnapshotFormatError,
    load_snapshot,
    load_snapshot_csv,
    load_snapshot_json,
    merge_rosters,
    rows_to_snapshot,
)

__all__ = [
    "SnapshotFormatError",
    "load_snapshot",
    "load_snapshot_csv",
    "load_snapshot_json",
    "merge_rosters",
    "rows_to_snapshot",
]
