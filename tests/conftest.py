from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from squadrank.models import EvaluationInfo, EvaluationSnapshot, RosterPlayer


def make_snapshot(
    evaluation_id: str,
    scores: dict[str, dict[str, Any]],
    *,
    clusters: dict[str, dict[str, Any]] | None = None,
    created_at: datetime | None = None,
) -> EvaluationSnapshot:
    return EvaluationSnapshot(
        evaluation=EvaluationInfo(id=evaluation_id, name=evaluation_id.title(), created_at=created_at),
        scores=scores,
        clusters=clusters or {},
    )


@pytest.fixture
def roster() -> list[RosterPlayer]:
    return [
        RosterPlayer(player_id="p1", display_name="Ava Stone"),
        RosterPlayer(player_id="p2", display_name="Ben Ortiz"),
        RosterPlayer(player_id="p3", display_name="Cleo Park"),
    ]


@pytest.fixture
def cycle_one() -> EvaluationSnapshot:
    return make_snapshot(
        "cycle-1",
        {
            "p1": {"agility_5_10_5_best_time": 6.0, "juggle_best": 20},
            "p2": {"agility_5_10_5_best_time": 5.2, "juggle_best": 35},
            "p3": {"agility_5_10_5_best_time": 5.4, "juggle_best": 30},
        },
        created_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def cycle_two() -> EvaluationSnapshot:
    return make_snapshot(
        "cycle-2",
        {
            "p1": {"agility_5_10_5_best_time": 5.0, "juggle_best": 20},
            "p2": {"agility_5_10_5_best_time": 5.2, "juggle_best": 35},
            "p3": {"agility_5_10_5_best_time": 5.4, "juggle_best": 30},
        },
        clusters={
            "p1": {"ps": 0.61, "tc": 0.4, "ms": 0.5, "dc": 0.7},
            "p2": {"ps": 0.81, "tc": 0.4, "ms": "0.55", "dc": None},
            "p3": {"ps": 0.33, "tc": 0.9},
        },
        created_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
