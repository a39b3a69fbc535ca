"""CSV export helpers for leaderboard reports."""

from __future__ import annotations

import csv
from io import StringIO

from .report import LeaderboardReport
from .values import format_number

EXPORT_HEADERS: tuple[str, ...] = (
    "board",
    "metric_id",
    "metric_name",
    "rank",
    "player_id",
    "player_name",
    "value",
    "label",
)


def export_rankings_to_csv(report: LeaderboardReport) -> str:
    """Flatten every cluster and test ranking of ``report`` into CSV text."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)

    for cluster in report.cluster_rankings:
        for entry in cluster.rankings:
            writer.writerow([
                "cluster",
                cluster.id,
                cluster.name,
                entry.rank,
                entry.player_id,
                entry.player_name,
                format_number(entry.value),
                f"{entry.percent}%",
            ])

    for test in report.test_rankings:
        for entry in test.rankings:
            writer.writerow([
                "test",
                test.id,
                test.name,
                entry.rank,
                entry.player_id,
                entry.player_name,
                format_number(entry.value),
                entry.value_label,
            ])

    return buffer.getvalue()


__all__ = ["EXPORT_HEADERS", "export_rankings_to_csv"]
