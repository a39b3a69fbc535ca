from squadrank.leaderboard import RankInput, rank_entries


def _inputs(values: dict[str, float]) -> list[RankInput]:
    return [RankInput(entity_id=key, label=key.upper(), value=value) for key, value in values.items()]


def test_competition_ranking_skips_after_ties():
    ranking = rank_entries(_inputs({"a": 10, "b": 10, "c": 7}), higher_is_better=True)
    assert [entry.rank for entry in ranking.ranked] == [1, 1, 3]
    assert ranking.rank_by_id == {"a": 1, "b": 1, "c": 3}


def test_rank_after_tie_block_counts_players_ahead():
    ranking = rank_entries(_inputs({"a": 9, "b": 8, "c": 8, "d": 8, "e": 2}), higher_is_better=True)
    assert [entry.rank for entry in ranking.ranked] == [1, 2, 2, 2, 5]


def test_direction_controls_order():
    values = {"A": 5.2, "B": 4.9}
    lower = rank_entries(_inputs(values), higher_is_better=False)
    higher = rank_entries(_inputs(values), higher_is_better=True)
    assert lower.top.entity_id == "B"
    assert higher.top.entity_id == "A"


def test_ties_keep_input_order_in_both_directions():
    values = {"p1": 5.5, "p2": 5.0, "p3": 5.0}
    ascending = rank_entries(_inputs(values), higher_is_better=False)
    assert [(entry.entity_id, entry.rank) for entry in ascending.ranked] == [
        ("p2", 1),
        ("p3", 1),
        ("p1", 3),
    ]

    descending = rank_entries(_inputs({"x": 3, "y": 4, "z": 4}), higher_is_better=True)
    assert [entry.entity_id for entry in descending.ranked] == ["y", "z", "x"]


def test_empty_ranking_has_no_top():
    ranking = rank_entries([], higher_is_better=True)
    assert ranking.top is None
    assert len(ranking) == 0
