"""Lightweight REST client for the squadrank API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx

from squadrank.ingest import SnapshotFormatError, load_snapshot


def _upload(client: httpx.Client, team_id: str, path: Path) -> None:
    try:
        snapshot, roster = load_snapshot(path)
    except SnapshotFormatError as exc:
        raise SystemExit(str(exc)) from exc

    if roster:
        resp = client.put(
            f"/teams/{team_id}/players",
            json={"players": [{"playerId": p.player_id, "displayName": p.display_name} for p in roster]},
        )
        resp.raise_for_status()

    evaluation = snapshot.evaluation
    resp = client.post(
        f"/teams/{team_id}/evaluations",
        json={
            "id": evaluation.id,
            "name": evaluation.name,
            "createdAt": evaluation.created_at.isoformat() if evaluation.created_at else None,
            "scores": snapshot.scores,
            "clusters": snapshot.clusters,
        },
    )
    if resp.status_code == 409:
        raise SystemExit(f"evaluation {evaluation.id} already uploaded")
    resp.raise_for_status()
    print(json.dumps(resp.json(), indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the squadrank REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("team_id", help="Team identifier")
    parser.add_argument("--upload", type=Path, action="append", default=[], help="Snapshot file(s) to upload")
    parser.add_argument("--list-evaluations", action="store_true", help="List stored evaluations and exit")
    parser.add_argument("--export-path", type=Path, help="Download the rankings CSV to this path")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        for path in args.upload:
            _upload(client, args.team_id, path)

        if args.list_evaluations:
            resp = client.get(f"/teams/{args.team_id}/evaluations")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.export_path:
            resp = client.get(f"/teams/{args.team_id}/leaderboards/export.csv")
            resp.raise_for_status()
            args.export_path.write_text(resp.text)
            print(f"CSV export saved to {args.export_path}")
            return

        resp = client.get(f"/teams/{args.team_id}/leaderboards")
        resp.raise_for_status()
        print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
