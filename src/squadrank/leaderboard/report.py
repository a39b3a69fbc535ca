"""Assemble the full team leaderboard report."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from squadrank.config.catalog import DEFAULT_CATALOG, MetricCatalog
from squadrank.models import EvaluationInfo, EvaluationSnapshot, RosterPlayer

from .builder import ClusterRanking, TestRanking, build_cluster_rankings, build_test_rankings, select_cycles
from .progress import Movers, compare_cycles


logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class LeaderboardReport:
    team_id: str
    latest_evaluation: EvaluationInfo | None = None
    previous_evaluation: EvaluationInfo | None = None
    cluster_rankings: tuple[ClusterRanking, ...] = ()
    test_rankings: tuple[TestRanking, ...] = ()
    movers: Movers = field(default_factory=Movers)

    @property
    def is_empty(self) -> bool:
        return self.latest_evaluation is None


def roster_names(roster: Iterable[RosterPlayer]) -> dict[str, str]:
    return {player.player_id: player.display_name.strip() for player in roster}


def build_leaderboard_report(
    team_id: str,
    evaluations: Sequence[EvaluationSnapshot],
    roster: Iterable[RosterPlayer] = (),
    *,
    catalog: MetricCatalog = DEFAULT_CATALOG,
) -> LeaderboardReport:
    """Rank the latest cycle and compare it against the one before it.

    A team without evaluations yields an empty report rather than an error.
    """

    latest, previous = select_cycles(evaluations)
    if latest is None:
        logger.info("No evaluations for team %s; returning empty leaderboard", team_id)
        return LeaderboardReport(team_id=team_id)
    return build_cycle_report(team_id, latest, previous, roster, catalog=catalog)


def build_cycle_report(
    team_id: str,
    latest: EvaluationSnapshot,
    previous: EvaluationSnapshot | None,
    roster: Iterable[RosterPlayer] = (),
    *,
    catalog: MetricCatalog = DEFAULT_CATALOG,
) -> LeaderboardReport:
    """Build the report for cycles whose latest/previous roles are already known."""

    names = roster_names(roster)
    cluster_rankings = build_cluster_rankings(latest, names, catalog)
    test_rankings, raw_rankings = build_test_rankings(latest, names, catalog)
    movers = compare_cycles(
        latest,
        previous,
        names,
        catalog=catalog,
        latest_rankings=raw_rankings,
    )

    logger.info(
        "Built leaderboard for team %s: latest=%s previous=%s players=%s improved=%s dropped=%s",
        team_id,
        latest.evaluation.id,
        previous.evaluation.id if previous else None,
        len(latest.scores),
        len(movers.most_improved),
        len(movers.biggest_drop),
    )
    return LeaderboardReport(
        team_id=team_id,
        latest_evaluation=latest.evaluation,
        previous_evaluation=previous.evaluation if previous else None,
        cluster_rankings=tuple(cluster_rankings),
        test_rankings=tuple(test_rankings),
        movers=movers,
    )


__all__ = ["LeaderboardReport", "build_cycle_report", "build_leaderboard_report", "roster_names"]
