"""Persistence layer for team rosters and evaluation snapshots."""

from __future__ import annotations

import json
import os
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Mapping, Optional
from uuid import uuid4

from squadrank.models import EvaluationInfo, EvaluationSnapshot, RosterPlayer


DB_PATH_ENV = "SQUADRANK_DB_PATH"


@dataclass
class EvaluationRecord:
    evaluation_id: str
    team_id: str
    name: str
    created_at: Optional[datetime]
    scores: dict
    clusters: dict

    def to_snapshot(self) -> EvaluationSnapshot:
        return EvaluationSnapshot(
            evaluation=EvaluationInfo(id=self.evaluation_id, name=self.name, created_at=self.created_at),
            scores=self.scores,
            clusters=self.clusters,
        )


class EvaluationStore:
    """Simple SQLite-backed store for rosters and evaluation score documents."""

    def __init__(self, db_path: Path | str | None = None):
        self._use_uri = False
        env_db = os.getenv(DB_PATH_ENV)
        if db_path is None and env_db:
            if env_db.startswith("file:"):
                self.db_path: Path | str = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif db_path is None:
            self.db_path = Path(__file__).resolve().parent.parent / "squadrank.sqlite"
        elif isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.OperationalError:
            fallback_dir = Path(tempfile.gettempdir()) / "squadrank-runtime"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / "squadrank.sqlite"
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._use_uri = False
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                team_id TEXT NOT NULL,
                id TEXT NOT NULL,
                display_name TEXT NOT NULL,
                position INTEGER NOT NULL,
                PRIMARY KEY (team_id, id)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS evaluations (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                team_id TEXT NOT NULL,
                name TEXT NOT NULL,
                created_at TEXT,
                scores_json TEXT NOT NULL,
                clusters_json TEXT NOT NULL
            )
            """
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_evaluations_team ON evaluations (team_id, seq)"
        )
        conn.commit()

    def replace_roster(self, team_id: str, players: Iterable[RosterPlayer]) -> List[RosterPlayer]:
        roster = list(players)
        with self._connect() as conn:
            conn.execute("DELETE FROM players WHERE team_id = ?", (team_id,))
            conn.executemany(
                "INSERT OR REPLACE INTO players (team_id, id, display_name, position) VALUES (?, ?, ?, ?)",
                [
                    (team_id, player.player_id, player.display_name, position)
                    for position, player in enumerate(roster)
                ],
            )
            conn.commit()
        return self.list_roster(team_id)

    def list_roster(self, team_id: str) -> List[RosterPlayer]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, display_name FROM players WHERE team_id = ? ORDER BY position",
                (team_id,),
            ).fetchall()
        return [RosterPlayer(player_id=row["id"], display_name=row["display_name"]) for row in rows]

    def save_evaluation(
        self,
        *,
        team_id: str,
        name: str,
        scores: Mapping[str, Optional[dict]],
        clusters: Mapping[str, Optional[dict]] | None = None,
        created_at: Optional[datetime] = None,
        evaluation_id: Optional[str] = None,
    ) -> EvaluationRecord:
        evaluation_id = evaluation_id or uuid4().hex
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO evaluations (id, team_id, name, created_at, scores_json, clusters_json)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    evaluation_id,
                    team_id,
                    name,
                    created_at.isoformat() if created_at else None,
                    json.dumps(dict(scores)),
                    json.dumps(dict(clusters or {})),
                ),
            )
            conn.commit()
        record = self.get_evaluation(team_id, evaluation_id)
        if record is None:
            raise KeyError(f"Evaluation {evaluation_id} was not persisted")
        return record

    def get_evaluation(self, team_id: str, evaluation_id: str) -> Optional[EvaluationRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM evaluations WHERE id = ? AND team_id = ?",
                (evaluation_id, team_id),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    def list_evaluations(self, team_id: str) -> List[EvaluationRecord]:
        """Return a team's evaluations in the order they were stored."""

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM evaluations WHERE team_id = ? ORDER BY seq",
                (team_id,),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def delete_evaluation(self, team_id: str, evaluation_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM evaluations WHERE id = ? AND team_id = ?",
                (evaluation_id, team_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def load_snapshots(self, team_id: str) -> List[EvaluationSnapshot]:
        return [record.to_snapshot() for record in self.list_evaluations(team_id)]

    def _row_to_record(self, row: sqlite3.Row) -> EvaluationRecord:
        created_raw = row["created_at"]
        created_at = datetime.fromisoformat(created_raw) if created_raw else None
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return EvaluationRecord(
            evaluation_id=row["id"],
            team_id=row["team_id"],
            name=row["name"],
            created_at=created_at,
            scores=json.loads(row["scores_json"]),
            clusters=json.loads(row["clusters_json"]),
        )


__all__ = ["DB_PATH_ENV", "EvaluationRecord", "EvaluationStore"]
