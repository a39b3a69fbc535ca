"""Pydantic models for API I/O."""

from .evaluation import (
    EvaluationCreateRequest,
    EvaluationDetailResponse,
    EvaluationSummaryResponse,
    LeaderboardComputeRequest,
    MetricResponse,
    RosterPlayerPayload,
    RosterRequest,
    RosterResponse,
)
from .leaderboard import (
    ClusterRankingResponse,
    LeaderboardReportResponse,
    MetricChangeResponse,
    MoversResponse,
    PlayerSummaryResponse,
    TestRankingResponse,
    report_to_response,
)

__all__ = [
    "ClusterRankingResponse",
    "EvaluationCreateRequest",
    "EvaluationDetailResponse",
    "EvaluationSummaryResponse",
    "LeaderboardComputeRequest",
    "LeaderboardReportResponse",
    "MetricChangeResponse",
    "MetricResponse",
    "MoversResponse",
    "PlayerSummaryResponse",
    "RosterPlayerPayload",
    "RosterRequest",
    "RosterResponse",
    "TestRankingResponse",
    "report_to_response",
]
