"""Team leaderboards: ranking, cycle comparison and export."""

from .builder import (
    ClusterEntry,
    ClusterRanking,
    TestEntry,
    TestRanking,
    build_cluster_rankings,
    build_test_rankings,
    select_cycles,
)
from .export import export_rankings_to_csv
from .progress import MetricChange, Movers, PlayerSummary, compare_cycles, percent_change
from .ranking import RankedEntry, RankInput, Ranking, rank_entries
from .report import LeaderboardReport, build_cycle_report, build_leaderboard_report
from .values import extract_cluster, extract_value, format_value, to_finite_number

__all__ = [
    "ClusterEntry",
    "ClusterRanking",
    "LeaderboardReport",
    "MetricChange",
    "Movers",
    "PlayerSummary",
    "RankInput",
    "RankedEntry",
    "Ranking",
    "TestEntry",
    "TestRanking",
    "build_cluster_rankings",
    "build_cycle_report",
    "build_leaderboard_report",
    "build_test_rankings",
    "compare_cycles",
    "export_rankings_to_csv",
    "extract_cluster",
    "extract_value",
    "format_value",
    "percent_change",
    "rank_entries",
    "select_cycles",
    "to_finite_number",
]
