"""Per-metric team rankings for the most recent evaluation cycle."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from squadrank.config.catalog import (
    DEFAULT_CATALOG,
    ClusterDefinition,
    MetricCatalog,
    MetricDefinition,
)
from squadrank.models import EvaluationSnapshot

from .ranking import RankInput, Ranking, rank_entries
from .values import extract_cluster, extract_value, format_value

DEFAULT_PLAYER_NAME = "Player"


@dataclass(frozen=True)
class ClusterEntry:
    rank: int
    player_id: str
    player_name: str
    percent: int
    value: float


@dataclass(frozen=True)
class ClusterRanking:
    id: str
    name: str
    top: ClusterEntry | None
    rankings: tuple[ClusterEntry, ...]


@dataclass(frozen=True)
class TestEntry:
    rank: int
    player_id: str
    player_name: str
    value: float
    value_label: str


@dataclass(frozen=True)
class TestRanking:
    id: str
    name: str
    higher_is_better: bool
    top: TestEntry | None
    rankings: tuple[TestEntry, ...]


def player_name(names: Mapping[str, str], player_id: str) -> str:
    return names.get(player_id) or DEFAULT_PLAYER_NAME


def _as_percent(value: float) -> int:
    # halves round up, never to even
    return math.floor(value * 100 + 0.5)


def rank_metric(
    metric: MetricDefinition,
    scores: Mapping[str, Any],
    names: Mapping[str, str],
) -> Ranking:
    """Rank every player whose score document yields a value for ``metric``."""

    rows = []
    for player_id, document in scores.items():
        value = extract_value(metric, document)
        if value is None:
            continue
        rows.append(RankInput(entity_id=player_id, label=player_name(names, player_id), value=value))
    return rank_entries(rows, metric.higher_is_better)


def rank_cluster(
    cluster: ClusterDefinition,
    clusters: Mapping[str, Any],
    names: Mapping[str, str],
) -> Ranking:
    rows = []
    for player_id, document in clusters.items():
        value = extract_cluster(cluster, document)
        # must still be finite once scaled to a percent
        if value is None or not math.isfinite(value * 100):
            continue
        rows.append(RankInput(entity_id=player_id, label=player_name(names, player_id), value=value))
    return rank_entries(rows, cluster.higher_is_better)


def build_cluster_rankings(
    snapshot: EvaluationSnapshot,
    names: Mapping[str, str],
    catalog: MetricCatalog = DEFAULT_CATALOG,
) -> list[ClusterRanking]:
    results: list[ClusterRanking] = []
    for cluster in catalog.clusters:
        ranking = rank_cluster(cluster, snapshot.clusters, names)
        entries = tuple(
            ClusterEntry(
                rank=entry.rank,
                player_id=entry.entity_id,
                player_name=entry.label,
                percent=_as_percent(entry.value),
                value=entry.value,
            )
            for entry in ranking.ranked
        )
        results.append(
            ClusterRanking(
                id=cluster.id,
                name=cluster.name,
                top=entries[0] if entries else None,
                rankings=entries,
            )
        )
    return results


def build_test_rankings(
    snapshot: EvaluationSnapshot,
    names: Mapping[str, str],
    catalog: MetricCatalog = DEFAULT_CATALOG,
) -> tuple[list[TestRanking], dict[str, Ranking]]:
    """Return display rankings plus the raw rankings keyed by metric id."""

    results: list[TestRanking] = []
    raw: dict[str, Ranking] = {}
    for metric in catalog.tests:
        ranking = rank_metric(metric, snapshot.scores, names)
        raw[metric.id] = ranking
        entries = tuple(
            TestEntry(
                rank=entry.rank,
                player_id=entry.entity_id,
                player_name=entry.label,
                value=entry.value,
                value_label=format_value(metric, entry.value),
            )
            for entry in ranking.ranked
        )
        results.append(
            TestRanking(
                id=metric.id,
                name=metric.name,
                higher_is_better=metric.higher_is_better,
                top=entries[0] if entries else None,
                rankings=entries,
            )
        )
    return results, raw


def _created_sort_key(created_at: datetime | None) -> tuple[int, float]:
    if created_at is None:
        return (1, 0.0)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return (0, -created_at.timestamp())


def select_cycles(
    evaluations: Sequence[EvaluationSnapshot],
) -> tuple[EvaluationSnapshot | None, EvaluationSnapshot | None]:
    """Pick (latest, previous) by creation time, newest first, undated last.

    Evaluations sharing a timestamp keep their input order, so the one listed
    first wins.
    """

    ordered = sorted(evaluations, key=lambda snap: _created_sort_key(snap.evaluation.created_at))
    latest = ordered[0] if ordered else None
    previous = ordered[1] if len(ordered) > 1 else None
    return latest, previous


__all__ = [
    "DEFAULT_PLAYER_NAME",
    "ClusterEntry",
    "ClusterRanking",
    "TestEntry",
    "TestRanking",
    "build_cluster_rankings",
    "build_test_rankings",
    "player_name",
    "rank_cluster",
    "rank_metric",
    "select_cycles",
]
