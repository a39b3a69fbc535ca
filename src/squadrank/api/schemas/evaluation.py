from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .base import CamelModel


class RosterPlayerPayload(CamelModel):
    player_id: str = Field(..., min_length=1)
    display_name: str = ""


class RosterRequest(CamelModel):
    players: List[RosterPlayerPayload] = Field(default_factory=list)


class RosterResponse(CamelModel):
    team_id: str
    players: List[RosterPlayerPayload]


class EvaluationCreateRequest(CamelModel):
    id: Optional[str] = Field(default=None, min_length=1)
    name: str = ""
    created_at: Optional[datetime] = None
    scores: Dict[str, Optional[Dict[str, Any]]] = Field(default_factory=dict)
    clusters: Dict[str, Optional[Dict[str, Any]]] = Field(default_factory=dict)


class EvaluationSummaryResponse(CamelModel):
    id: str
    team_id: str
    name: str
    created_at: datetime | None
    player_count: int


class EvaluationDetailResponse(EvaluationSummaryResponse):
    scores: Dict[str, Optional[Dict[str, Any]]]
    clusters: Dict[str, Optional[Dict[str, Any]]]


class LeaderboardComputeRequest(CamelModel):
    """Stateless leaderboard request carrying its own roster and evaluations."""

    team_id: str = "adhoc"
    roster: List[RosterPlayerPayload] = Field(default_factory=list)
    evaluations: List[EvaluationCreateRequest] = Field(default_factory=list)


class MetricResponse(CamelModel):
    id: str
    name: str
    higher_is_better: bool
    kind: Literal["test", "cluster"]
    source_fields: List[str] = Field(default_factory=list)
    unit: str | None = None
