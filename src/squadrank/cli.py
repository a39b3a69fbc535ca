"""Command-line interface for building leaderboards from exported score sheets."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from squadrank.api.schemas import report_to_response
from squadrank.ingest import SnapshotFormatError, load_snapshot, merge_rosters
from squadrank.leaderboard import LeaderboardReport, build_cycle_report, export_rankings_to_csv


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build team leaderboards from evaluation snapshots")
    parser.add_argument("latest", type=Path, help="Latest evaluation snapshot (.csv or .json)")
    parser.add_argument(
        "--previous",
        type=Path,
        default=None,
        help="Previous evaluation snapshot to compare the latest one against",
    )
    parser.add_argument("--team-id", default="team", help="Team identifier used in the report")
    parser.add_argument("--output", type=Path, default=None, help="Write the full report as JSON")
    parser.add_argument("--csv", type=Path, default=None, help="Write every ranking row as CSV")
    return parser.parse_args(argv)


def _print_summary(report: LeaderboardReport) -> None:
    if report.latest_evaluation is None:
        print("No evaluations found")
        return

    print(f"Latest evaluation: {report.latest_evaluation.name or report.latest_evaluation.id}")
    if report.previous_evaluation is not None:
        print(f"Compared against: {report.previous_evaluation.name or report.previous_evaluation.id}")

    for cluster in report.cluster_rankings:
        if cluster.top:
            print(f"  {cluster.name}: {cluster.top.player_name} ({cluster.top.percent}%)")
    for test in report.test_rankings:
        if test.top:
            print(f"  {test.name}: {test.top.player_name} ({test.top.value_label})")

    if report.movers.most_improved:
        names = ", ".join(
            f"{summary.player_name} ({summary.score_pct:+d}%)" for summary in report.movers.most_improved
        )
        print(f"Most improved: {names}")
    if report.movers.biggest_drop:
        names = ", ".join(
            f"{summary.player_name} ({summary.score_pct:+d}%)" for summary in report.movers.biggest_drop
        )
        print(f"Biggest drop: {names}")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    try:
        latest, latest_roster = load_snapshot(args.latest)
        previous, previous_roster = None, ()
        if args.previous:
            previous, previous_roster = load_snapshot(args.previous)
    except (OSError, SnapshotFormatError) as exc:
        raise SystemExit(f"Could not load snapshot: {exc}") from exc

    # positional/--previous roles win over created_at
    report = build_cycle_report(args.team_id, latest, previous, merge_rosters([latest_roster, previous_roster]))
    _print_summary(report)

    if args.output:
        payload = report_to_response(report).model_dump(mode="json", by_alias=True)
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote report to {args.output}")
    if args.csv:
        args.csv.write_text(export_rankings_to_csv(report), encoding="utf-8")
        print(f"Wrote rankings to {args.csv}")


if __name__ == "__main__":
    main()
