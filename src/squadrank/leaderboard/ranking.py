"""Competition ranking over (entity, value) pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping


@dataclass(frozen=True)
class RankInput:
    entity_id: str
    label: str
    value: float


@dataclass(frozen=True)
class RankedEntry:
    rank: int
    entity_id: str
    label: str
    value: float


@dataclass(frozen=True)
class Ranking:
    """Ordered entries plus a reverse lookup from entity id to rank."""

    ranked: tuple[RankedEntry, ...]
    rank_by_id: Mapping[str, int]

    @property
    def top(self) -> RankedEntry | None:
        return self.ranked[0] if self.ranked else None

    def __len__(self) -> int:
        return len(self.ranked)


def rank_entries(entries: Iterable[RankInput], higher_is_better: bool) -> Ranking:
    """Rank entries best-first using 1,1,3 competition ranking.

    Ties keep their input order: ``sorted`` is stable and the descending case
    sorts on the negated value instead of using ``reverse=True``.
    """

    if higher_is_better:
        ordered = sorted(entries, key=lambda entry: -entry.value)
    else:
        ordered = sorted(entries, key=lambda entry: entry.value)

    ranked: list[RankedEntry] = []
    rank = 0
    last_value: float | None = None
    for position, entry in enumerate(ordered, start=1):
        if last_value is None or entry.value != last_value:
            rank = position
            last_value = entry.value
        ranked.append(
            RankedEntry(rank=rank, entity_id=entry.entity_id, label=entry.label, value=entry.value)
        )

    rank_by_id = {entry.entity_id: entry.rank for entry in ranked}
    return Ranking(ranked=tuple(ranked), rank_by_id=rank_by_id)


__all__ = ["RankInput", "RankedEntry", "Ranking", "rank_entries"]
