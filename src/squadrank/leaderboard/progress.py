"""Compare two evaluation cycles and surface the biggest movers."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping

from squadrank.config.catalog import DEFAULT_CATALOG, MetricCatalog
from squadrank.models import EvaluationSnapshot

from .builder import player_name, rank_metric
from .ranking import Ranking
from .values import extract_value, format_value


logger = logging.getLogger(__name__)

_MEANINGFUL_THRESHOLD_ENV = "SQUADRANK_MEANINGFUL_THRESHOLD"
_MOVERS_LIMIT_ENV = "SQUADRANK_MOVERS_LIMIT"
_HIGHLIGHT_LIMIT_ENV = "SQUADRANK_HIGHLIGHT_LIMIT"

# Heuristic: a change counts when the rank moved or the contribution clears this.
_MEANINGFUL_THRESHOLD_DEFAULT = 0.05
_MOVERS_LIMIT_DEFAULT = 5
_HIGHLIGHT_LIMIT_DEFAULT = 3


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def meaningful_threshold() -> float:
    return _env_float(_MEANINGFUL_THRESHOLD_ENV, _MEANINGFUL_THRESHOLD_DEFAULT, clamp_min=0.0, clamp_max=1.0)


def movers_limit() -> int:
    return _env_int(_MOVERS_LIMIT_ENV, _MOVERS_LIMIT_DEFAULT, min_value=1)


def highlight_limit() -> int:
    return _env_int(_HIGHLIGHT_LIMIT_ENV, _HIGHLIGHT_LIMIT_DEFAULT, min_value=1)


@dataclass(frozen=True)
class MetricChange:
    """How one player moved on one test between two cycles.

    ``contribution`` and ``delta_value`` are positive when the player got
    better, whatever the direction of the underlying measurement.
    """

    metric_id: str
    name: str
    percent_change_clamped: float
    old_rank: int | None
    new_rank: int | None
    rank_delta: int | None
    old_value: float
    new_value: float
    old_label: str
    new_label: str
    delta_value: float
    delta_label: str
    contribution: float


@dataclass(frozen=True)
class PlayerSummary:
    player_id: str
    player_name: str
    score: float
    score_pct: int
    improved: tuple[MetricChange, ...]
    declined: tuple[MetricChange, ...]
    changes: tuple[MetricChange, ...]


@dataclass(frozen=True)
class Movers:
    most_improved: tuple[PlayerSummary, ...] = ()
    biggest_drop: tuple[PlayerSummary, ...] = ()


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def percent_change(old: float, new: float, higher_is_better: bool) -> float | None:
    """Relative change where positive means improved; None when undefined."""

    if not math.isfinite(old) or not math.isfinite(new):
        return None
    if old == 0:
        return None
    if higher_is_better:
        return (new - old) / abs(old)
    return (old - new) / abs(old)


def _score_pct(score: float) -> int:
    return math.floor(score * 100 + 0.5)


def player_changes(
    player_id: str,
    latest_scores: object,
    previous_scores: object,
    *,
    latest_rankings: Mapping[str, Ranking],
    previous_rankings: Mapping[str, Ranking],
    catalog: MetricCatalog = DEFAULT_CATALOG,
) -> list[MetricChange]:
    changes: list[MetricChange] = []
    for metric in catalog.tests:
        old = extract_value(metric, previous_scores)
        new = extract_value(metric, latest_scores)
        if old is None or new is None:
            continue
        pct = percent_change(old, new, metric.higher_is_better)
        if pct is None:
            logger.debug("Skipping %s for player %s: previous value is zero", metric.id, player_id)
            continue
        clamped = clamp(pct, -1.0, 1.0)

        latest_ranking = latest_rankings.get(metric.id)
        previous_ranking = previous_rankings.get(metric.id)
        old_rank = previous_ranking.rank_by_id.get(player_id) if previous_ranking else None
        new_rank = latest_ranking.rank_by_id.get(player_id) if latest_ranking else None
        rank_delta = None if old_rank is None or new_rank is None else old_rank - new_rank

        ranked_count = len(latest_ranking) if latest_ranking else 0
        if rank_delta is not None and ranked_count > 1:
            contribution = clamp(rank_delta / (ranked_count - 1), -1.0, 1.0)
        else:
            contribution = clamped

        delta_value = new - old if metric.higher_is_better else old - new
        changes.append(
            MetricChange(
                metric_id=metric.id,
                name=metric.name,
                percent_change_clamped=clamped,
                old_rank=old_rank,
                new_rank=new_rank,
                rank_delta=rank_delta,
                old_value=old,
                new_value=new,
                old_label=format_value(metric, old),
                new_label=format_value(metric, new),
                delta_value=delta_value,
                delta_label=format_value(metric, abs(delta_value)),
                contribution=contribution,
            )
        )
    return changes


def composite_score(changes: list[MetricChange], threshold: float | None = None) -> float | None:
    """Mean contribution over meaningful changes, or over all when none qualify."""

    if not changes:
        return None
    if threshold is None:
        threshold = meaningful_threshold()
    meaningful = [
        change
        for change in changes
        if (change.rank_delta is not None and change.rank_delta != 0)
        or abs(change.contribution) >= threshold
    ]
    considered = meaningful or changes
    return sum(change.contribution for change in considered) / len(considered)


def summarize_player(
    player_id: str,
    name: str,
    changes: list[MetricChange],
    *,
    threshold: float | None = None,
    highlights: int | None = None,
) -> PlayerSummary | None:
    score = composite_score(changes, threshold)
    if score is None:
        return None
    limit = highlights if highlights is not None else highlight_limit()
    improved = sorted(
        (change for change in changes if change.contribution > 0),
        key=lambda change: -change.contribution,
    )[:limit]
    declined = sorted(
        (change for change in changes if change.contribution < 0),
        key=lambda change: change.contribution,
    )[:limit]
    return PlayerSummary(
        player_id=player_id,
        player_name=name,
        score=score,
        score_pct=_score_pct(score),
        improved=tuple(improved),
        declined=tuple(declined),
        changes=tuple(changes),
    )


def compare_cycles(
    latest: EvaluationSnapshot,
    previous: EvaluationSnapshot | None,
    names: Mapping[str, str],
    *,
    catalog: MetricCatalog = DEFAULT_CATALOG,
    latest_rankings: Mapping[str, Ranking] | None = None,
) -> Movers:
    """Rank players by composite improvement between ``previous`` and ``latest``.

    Only players scored in both cycles are compared. ``latest_rankings`` may be
    passed in when the caller already ranked the latest cycle.
    """

    if previous is None:
        return Movers()

    if latest_rankings is None:
        latest_rankings = {
            metric.id: rank_metric(metric, latest.scores, names) for metric in catalog.tests
        }
    previous_rankings = {
        metric.id: rank_metric(metric, previous.scores, names) for metric in catalog.tests
    }

    threshold = meaningful_threshold()
    highlights = highlight_limit()
    summaries: list[PlayerSummary] = []
    for player_id, latest_scores in latest.scores.items():
        if player_id not in previous.scores:
            continue
        changes = player_changes(
            player_id,
            latest_scores,
            previous.scores[player_id],
            latest_rankings=latest_rankings,
            previous_rankings=previous_rankings,
            catalog=catalog,
        )
        summary = summarize_player(
            player_id,
            player_name(names, player_id),
            changes,
            threshold=threshold,
            highlights=highlights,
        )
        if summary is not None:
            summaries.append(summary)

    limit = movers_limit()
    # Negative composites belong to the drop list only, keeping the two lists disjoint.
    most_improved = sorted(
        (summary for summary in summaries if summary.score >= 0),
        key=lambda summary: -summary.score,
    )[:limit]
    biggest_drop = sorted(
        (summary for summary in summaries if summary.score < 0),
        key=lambda summary: summary.score,
    )[:limit]
    logger.debug(
        "Compared %s players between %s and %s",
        len(summaries),
        previous.evaluation.id,
        latest.evaluation.id,
    )
    return Movers(most_improved=tuple(most_improved), biggest_drop=tuple(biggest_drop))


__all__ = [
    "MetricChange",
    "Movers",
    "PlayerSummary",
    "clamp",
    "compare_cycles",
    "composite_score",
    "percent_change",
    "player_changes",
    "summarize_player",
]
