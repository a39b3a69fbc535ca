from __future__ import annotations

from datetime import datetime
from typing import List

from squadrank.leaderboard import (
    ClusterRanking,
    LeaderboardReport,
    MetricChange,
    Movers,
    PlayerSummary,
    TestRanking,
)
from squadrank.models import EvaluationInfo

from .base import CamelModel


class EvaluationInfoResponse(CamelModel):
    id: str
    name: str
    created_at: datetime | None


class ClusterTopResponse(CamelModel):
    player_id: str
    player_name: str
    percent: int


class ClusterRankingEntryResponse(CamelModel):
    rank: int
    player_id: str
    player_name: str
    percent: int
    value: float


class ClusterRankingResponse(CamelModel):
    id: str
    name: str
    top: ClusterTopResponse | None
    rankings: List[ClusterRankingEntryResponse]


class TestTopResponse(CamelModel):
    player_id: str
    player_name: str
    value: float
    value_label: str


class TestRankingEntryResponse(CamelModel):
    rank: int
    player_id: str
    player_name: str
    value: float
    value_label: str


class TestRankingResponse(CamelModel):
    id: str
    name: str
    higher_is_better: bool
    top: TestTopResponse | None
    rankings: List[TestRankingEntryResponse]


class MetricChangeResponse(CamelModel):
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


class PlayerSummaryResponse(CamelModel):
    player_id: str
    player_name: str
    score: float
    score_pct: int
    improved: List[MetricChangeResponse]
    declined: List[MetricChangeResponse]


class MoversResponse(CamelModel):
    most_improved: List[PlayerSummaryResponse] = []
    biggest_drop: List[PlayerSummaryResponse] = []


class LeaderboardReportResponse(CamelModel):
    latest_evaluation: EvaluationInfoResponse | None
    previous_evaluation: EvaluationInfoResponse | None
    cluster_rankings: List[ClusterRankingResponse]
    test_rankings: List[TestRankingResponse]
    movers: MoversResponse


def _evaluation_response(info: EvaluationInfo | None) -> EvaluationInfoResponse | None:
    if info is None:
        return None
    return EvaluationInfoResponse(id=info.id, name=info.name, created_at=info.created_at)


def _cluster_response(ranking: ClusterRanking) -> ClusterRankingResponse:
    top = ranking.top
    return ClusterRankingResponse(
        id=ranking.id,
        name=ranking.name,
        top=(
            ClusterTopResponse(player_id=top.player_id, player_name=top.player_name, percent=top.percent)
            if top
            else None
        ),
        rankings=[
            ClusterRankingEntryResponse(
                rank=entry.rank,
                player_id=entry.player_id,
                player_name=entry.player_name,
                percent=entry.percent,
                value=entry.value,
            )
            for entry in ranking.rankings
        ],
    )


def _test_response(ranking: TestRanking) -> TestRankingResponse:
    top = ranking.top
    return TestRankingResponse(
        id=ranking.id,
        name=ranking.name,
        higher_is_better=ranking.higher_is_better,
        top=(
            TestTopResponse(
                player_id=top.player_id,
                player_name=top.player_name,
                value=top.value,
                value_label=top.value_label,
            )
            if top
            else None
        ),
        rankings=[
            TestRankingEntryResponse(
                rank=entry.rank,
                player_id=entry.player_id,
                player_name=entry.player_name,
                value=entry.value,
                value_label=entry.value_label,
            )
            for entry in ranking.rankings
        ],
    )


def _change_response(change: MetricChange) -> MetricChangeResponse:
    return MetricChangeResponse(
        metric_id=change.metric_id,
        name=change.name,
        percent_change_clamped=change.percent_change_clamped,
        old_rank=change.old_rank,
        new_rank=change.new_rank,
        rank_delta=change.rank_delta,
        old_value=change.old_value,
        new_value=change.new_value,
        old_label=change.old_label,
        new_label=change.new_label,
        delta_value=change.delta_value,
        delta_label=change.delta_label,
        contribution=change.contribution,
    )


def _summary_response(summary: PlayerSummary) -> PlayerSummaryResponse:
    return PlayerSummaryResponse(
        player_id=summary.player_id,
        player_name=summary.player_name,
        score=summary.score,
        score_pct=summary.score_pct,
        improved=[_change_response(change) for change in summary.improved],
        declined=[_change_response(change) for change in summary.declined],
    )


def _movers_response(movers: Movers) -> MoversResponse:
    return MoversResponse(
        most_improved=[_summary_response(summary) for summary in movers.most_improved],
        biggest_drop=[_summary_response(summary) for summary in movers.biggest_drop],
    )


def report_to_response(report: LeaderboardReport) -> LeaderboardReportResponse:
    return LeaderboardReportResponse(
        latest_evaluation=_evaluation_response(report.latest_evaluation),
        previous_evaluation=_evaluation_response(report.previous_evaluation),
        cluster_rankings=[_cluster_response(ranking) for ranking in report.cluster_rankings],
        test_rankings=[_test_response(ranking) for ranking in report.test_rankings],
        movers=_movers_response(report.movers),
    )
