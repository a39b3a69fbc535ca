from datetime import datetime, timezone
from pathlib import Path

import pytest

from squadrank.models import RosterPlayer
from squadrank.persistence import EvaluationStore


@pytest.fixture
def store(tmp_path: Path) -> EvaluationStore:
    return EvaluationStore(tmp_path / "store.sqlite")


def test_roster_round_trip_keeps_order(store: EvaluationStore):
    store.replace_roster(
        "team-1",
        [RosterPlayer(player_id="p2", display_name="Ben"), RosterPlayer(player_id="p1", display_name="Ava")],
    )
    assert [player.player_id for player in store.list_roster("team-1")] == ["p2", "p1"]

    store.replace_roster("team-1", [RosterPlayer(player_id="p3", display_name="Cleo")])
    assert [player.player_id for player in store.list_roster("team-1")] == ["p3"]
    assert store.list_roster("team-2") == []


def test_evaluations_are_scoped_to_team(store: EvaluationStore):
    created = datetime(2024, 3, 1, tzinfo=timezone.utc)
    record = store.save_evaluation(
        team_id="team-1",
        name="Spring",
        scores={"p1": {"juggle_best": 10}},
        clusters={"p1": {"ps": 0.5}},
        created_at=created,
        evaluation_id="spring",
    )
    store.save_evaluation(team_id="team-1", name="Undated", scores={})
    store.save_evaluation(team_id="team-2", name="Other", scores={"x": {}})

    assert record.created_at == created
    assert record.scores == {"p1": {"juggle_best": 10}}
    assert [item.name for item in store.list_evaluations("team-1")] == ["Spring", "Undated"]
    assert store.get_evaluation("team-2", "spring") is None

    snapshots = store.load_snapshots("team-1")
    assert snapshots[0].evaluation.id == "spring"
    assert snapshots[0].clusters == {"p1": {"ps": 0.5}}
    assert snapshots[1].evaluation.created_at is None


def test_delete_evaluation(store: EvaluationStore):
    store.save_evaluation(team_id="team-1", name="Spring", scores={}, evaluation_id="spring")
    assert store.delete_evaluation("team-1", "spring") is True
    assert store.delete_evaluation("team-1", "spring") is False
    assert store.list_evaluations("team-1") == []


def test_env_path_is_used_when_no_path_given(tmp_path: Path, monkeypatch):
    target = tmp_path / "nested" / "env.sqlite"
    monkeypatch.setenv("SQUADRANK_DB_PATH", str(target))
    store = EvaluationStore()
    store.replace_roster("team-1", [RosterPlayer(player_id="p1")])
    assert target.exists()
