"""Canonical evaluation models shared across ingest, storage and leaderboards."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class RosterPlayer(BaseModel):
    """Team member as known to the leaderboard."""

    player_id: str = Field(..., min_length=1)
    display_name: str = ""

    model_config = ConfigDict(frozen=True)


class EvaluationInfo(BaseModel):
    """Identity of one evaluation cycle."""

    id: str = Field(..., min_length=1)
    name: str = ""
    created_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)


class EvaluationSnapshot(BaseModel):
    """Raw per-player score documents captured during one evaluation cycle.

    ``scores`` maps player id to the flat overall-score document; values are
    left untyped because the upstream JSON column is open-ended. ``clusters``
    maps player id to the ``ps``/``tc``/``ms``/``dc`` trait document.
    """

    evaluation: EvaluationInfo
    scores: Dict[str, Optional[Dict[str, Any]]] = Field(default_factory=dict)
    clusters: Dict[str, Optional[Dict[str, Any]]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
