"""Load evaluation snapshots from CSV or JSON exports."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from squadrank.config.catalog import DEFAULT_CATALOG, MetricCatalog
from squadrank.models import EvaluationInfo, EvaluationSnapshot, RosterPlayer


logger = logging.getLogger(__name__)

PLAYER_ID_COLUMN = "player_id"
PLAYER_NAME_COLUMN = "player_name"


class SnapshotFormatError(ValueError):
    """Raised when a snapshot file cannot be interpreted."""


def _normalize_header(value: str) -> str:
    return value.strip().lower()


def _cluster_keys(catalog: MetricCatalog) -> set[str]:
    return {cluster.id for cluster in catalog.clusters}


def rows_to_snapshot(
    rows: Iterable[Mapping[str, str]],
    evaluation: EvaluationInfo,
    *,
    catalog: MetricCatalog = DEFAULT_CATALOG,
) -> Tuple[EvaluationSnapshot, List[RosterPlayer]]:
    """Split flat CSV rows into score/cluster documents plus a roster.

    Blank cells are dropped; values stay as strings because the leaderboard
    coerces numbers itself.
    """

    cluster_keys = _cluster_keys(catalog)
    scores: dict[str, dict[str, str]] = {}
    clusters: dict[str, dict[str, str]] = {}
    roster: list[RosterPlayer] = []

    for line_no, row in enumerate(rows, start=2):
        normalized = {
            _normalize_header(key): (value or "").strip()
            for key, value in row.items()
            if key is not None
        }
        player_id = normalized.pop(PLAYER_ID_COLUMN, "")
        player_name = normalized.pop(PLAYER_NAME_COLUMN, "")
        if not player_id:
            logger.warning("Skipping row %s without %s", line_no, PLAYER_ID_COLUMN)
            continue
        if player_id in scores:
            logger.warning("Duplicate player %s on row %s; keeping the last row", player_id, line_no)
        else:
            roster.append(RosterPlayer(player_id=player_id, display_name=player_name))

        scores[player_id] = {
            key: value for key, value in normalized.items() if value and key not in cluster_keys
        }
        cluster_doc = {key: value for key, value in normalized.items() if value and key in cluster_keys}
        if cluster_doc:
            clusters[player_id] = cluster_doc

    snapshot = EvaluationSnapshot(evaluation=evaluation, scores=scores, clusters=clusters)
    return snapshot, roster


def load_snapshot_csv(
    path: Path,
    *,
    evaluation: Optional[EvaluationInfo] = None,
    catalog: MetricCatalog = DEFAULT_CATALOG,
) -> Tuple[EvaluationSnapshot, List[RosterPlayer]]:
    """Read a one-row-per-player CSV; the evaluation defaults to the undated file stem."""

    if evaluation is None:
        evaluation = EvaluationInfo(id=path.stem, name=path.stem)

    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        headers = [_normalize_header(name) for name in reader.fieldnames or []]
        if PLAYER_ID_COLUMN not in headers:
            raise SnapshotFormatError(f"{path} is missing a {PLAYER_ID_COLUMN!r} column")
        return rows_to_snapshot(reader, evaluation, catalog=catalog)


def load_snapshot_json(path: Path) -> Tuple[EvaluationSnapshot, List[RosterPlayer]]:
    """Read ``{"evaluation": ..., "scores": ..., "clusters": ..., "roster": [...]}``."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SnapshotFormatError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SnapshotFormatError(f"{path} must contain a JSON object")

    roster_payload = payload.pop("roster", None) or []
    try:
        snapshot = EvaluationSnapshot.model_validate(payload)
        roster = [RosterPlayer.model_validate(item) for item in roster_payload]
    except ValidationError as exc:
        raise SnapshotFormatError(f"Invalid snapshot in {path}: {exc}") from exc
    return snapshot, roster


def load_snapshot(path: Path, *, catalog: MetricCatalog = DEFAULT_CATALOG) -> Tuple[EvaluationSnapshot, List[RosterPlayer]]:
    if path.suffix.lower() == ".json":
        return load_snapshot_json(path)
    return load_snapshot_csv(path, catalog=catalog)


def merge_rosters(rosters: Sequence[Iterable[RosterPlayer]]) -> List[RosterPlayer]:
    """Combine rosters; the first non-empty display name per player wins."""

    merged: dict[str, RosterPlayer] = {}
    for roster in rosters:
        for player in roster:
            existing = merged.get(player.player_id)
            if existing is None or (not existing.display_name and player.display_name):
                merged[player.player_id] = player
    return list(merged.values())
