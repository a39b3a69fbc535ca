"""Metric catalog for check-in tests and trait clusters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal, Mapping, Tuple, Union


@dataclass(frozen=True)
class FieldSource:
    """Read a single field from a score document."""

    field: str


@dataclass(frozen=True)
class MaxOfFieldsSource:
    """Best of several independently nullable fields (e.g. left/right leg)."""

    fields: Tuple[str, ...]


ValueSource = Union[FieldSource, MaxOfFieldsSource]


@dataclass(frozen=True)
class ValueFormat:
    kind: Literal["default", "suffix"] = "default"
    unit: str = ""


DEFAULT_FORMAT = ValueFormat()


def suffix(unit: str) -> ValueFormat:
    return ValueFormat(kind="suffix", unit=unit)


@dataclass(frozen=True)
class MetricDefinition:
    id: str
    name: str
    higher_is_better: bool
    source: ValueSource
    value_format: ValueFormat = DEFAULT_FORMAT


@dataclass(frozen=True)
class ClusterDefinition:
    """Trait group scored upstream as a 0..1 value; always higher-is-better."""

    id: str
    name: str
    higher_is_better: bool = True


@dataclass(frozen=True)
class MetricCatalog:
    tests: Tuple[MetricDefinition, ...]
    clusters: Tuple[ClusterDefinition, ...]
    _by_id: Mapping[str, MetricDefinition] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lookup = {metric.id: metric for metric in self.tests}
        if len(lookup) != len(self.tests):
            raise ValueError("Metric ids must be unique within a catalog")
        object.__setattr__(self, "_by_id", lookup)

    def get(self, metric_id: str) -> MetricDefinition:
        if metric_id not in self._by_id:
            raise KeyError(f"No metric configured with id={metric_id!r}")
        return self._by_id[metric_id]


_TESTS: Tuple[MetricDefinition, ...] = (
    MetricDefinition(
        id="onevone",
        name="1v1",
        higher_is_better=True,
        source=FieldSource("one_v_one_avg_score"),
    ),
    MetricDefinition(
        id="agility",
        name="Agility (5-10-5)",
        higher_is_better=False,
        source=FieldSource("agility_5_10_5_best_time"),
        value_format=suffix("s"),
    ),
    MetricDefinition(
        id="ankle",
        name="Ankle Mobility",
        higher_is_better=True,
        source=FieldSource("ankle_dorsiflex_avg_cm"),
        value_format=suffix("cm"),
    ),
    MetricDefinition(
        id="jumps",
        name="Double Leg Jumps",
        higher_is_better=True,
        source=FieldSource("double_leg_jumps_total_reps"),
    ),
    MetricDefinition(
        id="core",
        name="Core Plank",
        higher_is_better=True,
        source=FieldSource("core_plank_hold_sec_if_good_form"),
        value_format=suffix("s"),
    ),
    MetricDefinition(
        id="hop",
        name="Single Leg Hop",
        higher_is_better=True,
        source=MaxOfFieldsSource(("single_leg_hop_left", "single_leg_hop_right")),
    ),
    MetricDefinition(
        id="juggling",
        name="Juggling",
        higher_is_better=True,
        source=FieldSource("juggle_best"),
    ),
    MetricDefinition(
        id="skillmoves",
        name="Skill Moves",
        higher_is_better=True,
        source=FieldSource("skill_moves_avg_rating"),
    ),
    MetricDefinition(
        id="figure8",
        name="Figure 8",
        higher_is_better=True,
        source=FieldSource("figure8_loops_both"),
    ),
    MetricDefinition(
        id="passing",
        name="Passing Gates",
        higher_is_better=True,
        source=FieldSource("passing_gates_total_hits"),
    ),
    MetricDefinition(
        id="reaction",
        name="Reaction Sprint (5m)",
        higher_is_better=False,
        source=FieldSource("reaction_5m_total_time_best"),
        value_format=suffix("s"),
    ),
    MetricDefinition(
        id="shotpower",
        name="Shot Power",
        higher_is_better=True,
        source=FieldSource("shot_power_strong_avg"),
    ),
    MetricDefinition(
        id="serve",
        name="Serve Distance",
        higher_is_better=True,
        source=FieldSource("serve_distance_strong_avg"),
    ),
)

_CLUSTERS: Tuple[ClusterDefinition, ...] = (
    ClusterDefinition(id="ps", name="Power / Strength"),
    ClusterDefinition(id="tc", name="Technique / Control"),
    ClusterDefinition(id="ms", name="Mobility / Stability"),
    ClusterDefinition(id="dc", name="Decision / Cognition"),
)

DEFAULT_CATALOG = MetricCatalog(tests=_TESTS, clusters=_CLUSTERS)


def iter_metrics(catalog: MetricCatalog = DEFAULT_CATALOG) -> Iterable[MetricDefinition]:
    """Return an iterator over catalog tests in display order."""

    return iter(catalog.tests)


def iter_clusters(catalog: MetricCatalog = DEFAULT_CATALOG) -> Iterable[ClusterDefinition]:
    return iter(catalog.clusters)


def get_metric(metric_id: str, catalog: MetricCatalog = DEFAULT_CATALOG) -> MetricDefinition:
    """Fetch a test definition by id, raising KeyError if missing."""

    return catalog.get(metric_id.strip().lower())


def source_fields(metric: MetricDefinition) -> Tuple[str, ...]:
    if isinstance(metric.source, FieldSource):
        return (metric.source.field,)
    return tuple(metric.source.fields)


def subset(metric_ids: Iterable[str], catalog: MetricCatalog = DEFAULT_CATALOG) -> MetricCatalog:
    """Build a smaller catalog holding only the requested tests (clusters kept)."""

    return MetricCatalog(
        tests=tuple(get_metric(metric_id, catalog) for metric_id in metric_ids),
        clusters=catalog.clusters,
    )
