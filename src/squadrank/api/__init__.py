"""REST API for squadrank team leaderboards."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterable

from fastapi import FastAPI, HTTPException, Response

from squadrank.api.schemas import (
    EvaluationCreateRequest,
    EvaluationDetailResponse,
    EvaluationSummaryResponse,
    LeaderboardComputeRequest,
    LeaderboardReportResponse,
    MetricResponse,
    RosterPlayerPayload,
    RosterRequest,
    RosterResponse,
    report_to_response,
)
from squadrank.config import DEFAULT_CATALOG, iter_clusters, iter_metrics, source_fields
from squadrank.leaderboard import build_leaderboard_report, export_rankings_to_csv
from squadrank.models import EvaluationInfo, EvaluationSnapshot, RosterPlayer
from squadrank.persistence import EvaluationRecord, EvaluationStore


logger = logging.getLogger("uvicorn.error")


def _roster_from_payload(players: Iterable[RosterPlayerPayload]) -> list[RosterPlayer]:
    return [RosterPlayer(player_id=player.player_id, display_name=player.display_name) for player in players]


def _roster_response(team_id: str, roster: Iterable[RosterPlayer]) -> RosterResponse:
    return RosterResponse(
        team_id=team_id,
        players=[
            RosterPlayerPayload(player_id=player.player_id, display_name=player.display_name)
            for player in roster
        ],
    )


def _evaluation_summary(record: EvaluationRecord) -> EvaluationSummaryResponse:
    return EvaluationSummaryResponse(
        id=record.evaluation_id,
        team_id=record.team_id,
        name=record.name,
        created_at=record.created_at,
        player_count=len(record.scores),
    )


def _evaluation_detail(record: EvaluationRecord) -> EvaluationDetailResponse:
    return EvaluationDetailResponse(
        id=record.evaluation_id,
        team_id=record.team_id,
        name=record.name,
        created_at=record.created_at,
        player_count=len(record.scores),
        scores=record.scores,
        clusters=record.clusters,
    )


def _snapshot_from_payload(payload: EvaluationCreateRequest, index: int) -> EvaluationSnapshot:
    evaluation_id = payload.id or f"evaluation-{index + 1}"
    return EvaluationSnapshot(
        evaluation=EvaluationInfo(
            id=evaluation_id,
            name=payload.name or evaluation_id,
            created_at=payload.created_at,
        ),
        scores=payload.scores,
        clusters=payload.clusters,
    )


def catalog_listing() -> list[MetricResponse]:
    metrics = [
        MetricResponse(
            id=metric.id,
            name=metric.name,
            higher_is_better=metric.higher_is_better,
            kind="test",
            source_fields=list(source_fields(metric)),
            unit=metric.value_format.unit or None,
        )
        for metric in iter_metrics(DEFAULT_CATALOG)
    ]
    metrics.extend(
        MetricResponse(
            id=cluster.id,
            name=cluster.name,
            higher_is_better=cluster.higher_is_better,
            kind="cluster",
            source_fields=[cluster.id],
        )
        for cluster in iter_clusters(DEFAULT_CATALOG)
    )
    return metrics


def create_app(db_path: Path | str | None = None) -> FastAPI:
    app = FastAPI(title="squadrank leaderboards")
    store = EvaluationStore(db_path)
    app.state.evaluation_store = store

    def _team_report(team_id: str):
        return build_leaderboard_report(
            team_id,
            store.load_snapshots(team_id),
            store.list_roster(team_id),
        )

    def _fetch_evaluation_or_404(team_id: str, evaluation_id: str) -> EvaluationRecord:
        record = store.get_evaluation(team_id, evaluation_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Evaluation not found")
        return record

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", response_model=list[MetricResponse])
    async def list_metrics() -> list[MetricResponse]:
        return catalog_listing()

    @app.put("/teams/{team_id}/players", response_model=RosterResponse)
    async def replace_roster(team_id: str, payload: RosterRequest) -> RosterResponse:
        roster = store.replace_roster(team_id, _roster_from_payload(payload.players))
        logger.info("Stored roster for team %s (%s players)", team_id, len(roster))
        return _roster_response(team_id, roster)

    @app.get("/teams/{team_id}/players", response_model=RosterResponse)
    async def get_roster(team_id: str) -> RosterResponse:
        return _roster_response(team_id, store.list_roster(team_id))

    @app.post("/teams/{team_id}/evaluations", response_model=EvaluationSummaryResponse, status_code=201)
    async def create_evaluation(team_id: str, payload: EvaluationCreateRequest) -> EvaluationSummaryResponse:
        try:
            record = store.save_evaluation(
                team_id=team_id,
                name=payload.name,
                scores=payload.scores,
                clusters=payload.clusters,
                created_at=payload.created_at,
                evaluation_id=payload.id,
            )
        except sqlite3.IntegrityError as exc:
            raise HTTPException(status_code=409, detail=f"Evaluation {payload.id} already exists") from exc
        logger.info(
            "Stored evaluation %s for team %s (%s players)",
            record.evaluation_id,
            team_id,
            len(record.scores),
        )
        return _evaluation_summary(record)

    @app.get("/teams/{team_id}/evaluations", response_model=list[EvaluationSummaryResponse])
    async def list_evaluations(team_id: str) -> list[EvaluationSummaryResponse]:
        return [_evaluation_summary(record) for record in store.list_evaluations(team_id)]

    @app.get("/teams/{team_id}/evaluations/{evaluation_id}", response_model=EvaluationDetailResponse)
    async def get_evaluation(team_id: str, evaluation_id: str) -> EvaluationDetailResponse:
        return _evaluation_detail(_fetch_evaluation_or_404(team_id, evaluation_id))

    @app.delete("/teams/{team_id}/evaluations/{evaluation_id}", status_code=204)
    async def delete_evaluation(team_id: str, evaluation_id: str) -> Response:
        if not store.delete_evaluation(team_id, evaluation_id):
            raise HTTPException(status_code=404, detail="Evaluation not found")
        return Response(status_code=204)

    @app.get("/teams/{team_id}/leaderboards", response_model=LeaderboardReportResponse)
    async def team_leaderboards(team_id: str) -> LeaderboardReportResponse:
        return report_to_response(_team_report(team_id))

    @app.get("/teams/{team_id}/leaderboards/export.csv")
    async def export_leaderboards(team_id: str) -> Response:
        csv_text = export_rankings_to_csv(_team_report(team_id))
        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{team_id}-leaderboards.csv"'},
        )

    @app.post("/leaderboards", response_model=LeaderboardReportResponse)
    async def compute_leaderboards(payload: LeaderboardComputeRequest) -> LeaderboardReportResponse:
        snapshots = [
            _snapshot_from_payload(evaluation, index)
            for index, evaluation in enumerate(payload.evaluations)
        ]
        report = build_leaderboard_report(
            payload.team_id,
            snapshots,
            _roster_from_payload(payload.roster),
        )
        return report_to_response(report)

    return app
