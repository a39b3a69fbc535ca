import pytest

from squadrank.config import subset
from squadrank.leaderboard import compare_cycles, percent_change
from squadrank.leaderboard.builder import rank_metric
from squadrank.leaderboard.progress import MetricChange, composite_score, player_changes, summarize_player

from .conftest import make_snapshot


NAMES = {"p1": "Ava Stone", "p2": "Ben Ortiz", "p3": "Cleo Park"}


def _change(metric_id: str, contribution: float, rank_delta: int | None = 0) -> MetricChange:
    return MetricChange(
        metric_id=metric_id,
        name=metric_id,
        percent_change_clamped=contribution,
        old_rank=None,
        new_rank=None,
        rank_delta=rank_delta,
        old_value=1.0,
        new_value=1.0,
        old_label="1",
        new_label="1",
        delta_value=0.0,
        delta_label="0",
        contribution=contribution,
    )


def test_percent_change_respects_direction():
    assert percent_change(10, 12, True) == pytest.approx(0.2)
    assert percent_change(5.0, 4.5, False) == pytest.approx(0.1)
    assert percent_change(5.0, 5.5, False) == pytest.approx(-0.1)


def test_percent_change_guards_zero_baseline():
    assert percent_change(0, 10, True) is None
    assert percent_change(0.0, 3.0, False) is None


def test_large_jump_is_clamped_to_one():
    previous = make_snapshot("prev", {"solo": {"juggle_best": 1}})
    latest = make_snapshot("latest", {"solo": {"juggle_best": 1000}})
    catalog = subset(["juggling"])
    changes = player_changes(
        "solo",
        latest.scores["solo"],
        previous.scores["solo"],
        latest_rankings={"juggling": rank_metric(catalog.tests[0], latest.scores, {})},
        previous_rankings={"juggling": rank_metric(catalog.tests[0], previous.scores, {})},
        catalog=catalog,
    )
    assert len(changes) == 1
    assert changes[0].percent_change_clamped == 1
    # Singleton ranking: no rank movement signal, so the clamped percent is used.
    assert changes[0].contribution == 1
    assert changes[0].delta_value == 999
    assert changes[0].delta_label == "999"


def test_zero_baseline_skips_metric_for_player():
    previous = make_snapshot("prev", {"p1": {"juggle_best": 0, "passing_gates_total_hits": 4}})
    latest = make_snapshot("latest", {"p1": {"juggle_best": 12, "passing_gates_total_hits": 6}})
    movers = compare_cycles(latest, previous, NAMES, catalog=subset(["juggling", "passing"]))
    summary = movers.most_improved[0]
    assert [change.metric_id for change in summary.changes] == ["passing"]
    assert summary.score == pytest.approx(0.5)


def test_rank_jump_marks_player_most_improved(cycle_one, cycle_two):
    movers = compare_cycles(cycle_two, cycle_one, NAMES)

    assert [summary.player_id for summary in movers.most_improved] == ["p1"]
    leader = movers.most_improved[0]
    agility = next(change for change in leader.changes if change.metric_id == "agility")
    assert (agility.old_rank, agility.new_rank, agility.rank_delta) == (3, 1, 2)
    assert agility.contribution == pytest.approx(1.0)
    assert agility.percent_change_clamped == pytest.approx(1 / 6)
    assert agility.old_label == "6s"
    assert agility.new_label == "5s"
    assert agility.delta_label == "1s"
    assert leader.score_pct == 100
    assert [change.metric_id for change in leader.improved] == ["agility"]

    assert [summary.player_id for summary in movers.biggest_drop] == ["p2", "p3"]
    for summary in movers.biggest_drop:
        assert summary.score == pytest.approx(-0.5)
        assert summary.score_pct == -50
        assert [change.metric_id for change in summary.declined] == ["agility"]


def test_movers_lists_are_disjoint_and_drop_is_negative(cycle_one, cycle_two):
    movers = compare_cycles(cycle_two, cycle_one, NAMES)
    improved_ids = {summary.player_id for summary in movers.most_improved}
    dropped_ids = {summary.player_id for summary in movers.biggest_drop}
    assert improved_ids.isdisjoint(dropped_ids)
    assert all(summary.score < 0 for summary in movers.biggest_drop)


def test_no_previous_cycle_yields_empty_movers(cycle_two):
    movers = compare_cycles(cycle_two, None, NAMES)
    assert movers.most_improved == ()
    assert movers.biggest_drop == ()


def test_players_missing_from_a_cycle_are_not_compared(cycle_one):
    latest = make_snapshot(
        "latest",
        {
            "p1": {"agility_5_10_5_best_time": 5.9},
            "p4": {"agility_5_10_5_best_time": 4.0},
        },
    )
    movers = compare_cycles(latest, cycle_one, NAMES)
    compared = {summary.player_id for summary in movers.most_improved + movers.biggest_drop}
    assert "p4" not in compared
    assert "p2" not in compared


def test_composite_prefers_meaningful_changes():
    changes = [_change("a", 0.5, rank_delta=0), _change("b", 0.02, rank_delta=0)]
    assert composite_score(changes, threshold=0.05) == pytest.approx(0.5)


def test_composite_falls_back_to_all_changes():
    changes = [_change("a", 0.02, rank_delta=0), _change("b", -0.04, rank_delta=0)]
    assert composite_score(changes, threshold=0.05) == pytest.approx(-0.01)
    assert composite_score([], threshold=0.05) is None


def test_rank_movement_counts_as_meaningful():
    changes = [_change("a", 0.01, rank_delta=1), _change("b", 0.2, rank_delta=0)]
    assert composite_score(changes, threshold=0.05) == pytest.approx(0.105)


def test_summary_highlights_top_three_each_way():
    changes = [
        _change("a", 0.1),
        _change("b", 0.9),
        _change("c", 0.4),
        _change("d", 0.3),
        _change("e", -0.2),
        _change("f", -0.7),
    ]
    summary = summarize_player("p1", "Ava Stone", changes, threshold=0.05, highlights=3)
    assert [change.metric_id for change in summary.improved] == ["b", "c", "d"]
    assert [change.metric_id for change in summary.declined] == ["f", "e"]
    assert summarize_player("p1", "Ava Stone", [], threshold=0.05) is None


def test_movers_limit_from_environment(monkeypatch, cycle_one, cycle_two):
    monkeypatch.setenv("SQUADRANK_MOVERS_LIMIT", "1")
    movers = compare_cycles(cycle_two, cycle_one, NAMES)
    assert len(movers.biggest_drop) == 1
    assert movers.biggest_drop[0].player_id == "p2"


def test_invalid_threshold_env_falls_back(monkeypatch, cycle_one, cycle_two):
    monkeypatch.setenv("SQUADRANK_MEANINGFUL_THRESHOLD", "lots")
    movers = compare_cycles(cycle_two, cycle_one, NAMES)
    assert [summary.player_id for summary in movers.most_improved] == ["p1"]
