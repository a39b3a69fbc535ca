"""Read comparable numbers out of open-ended score documents."""

from __future__ import annotations

import math
from typing import Any, Mapping

from squadrank.config.catalog import (
    ClusterDefinition,
    FieldSource,
    MetricDefinition,
    ValueFormat,
)

MISSING_LABEL = "—"


def to_finite_number(raw: Any) -> float | None:
    """Coerce numbers and numeric strings; anything else (incl. NaN/inf) is None."""

    if isinstance(raw, bool):
        return None
    try:
        if isinstance(raw, (int, float)):
            value = float(raw)
        elif isinstance(raw, str) and raw.strip() and "_" not in raw:
            value = float(raw.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    return value if math.isfinite(value) else None


def _field(scores: Any, key: str) -> float | None:
    if not isinstance(scores, Mapping):
        return None
    return to_finite_number(scores.get(key))


def extract_value(metric: MetricDefinition, scores: Any) -> float | None:
    source = metric.source
    if isinstance(source, FieldSource):
        return _field(scores, source.field)

    present = [value for value in (_field(scores, key) for key in source.fields) if value is not None]
    if not present:
        return None
    return max(present)


def extract_cluster(cluster: ClusterDefinition, clusters: Any) -> float | None:
    return _field(clusters, cluster.id)


def format_number(value: float) -> str:
    """Render with at most three decimals; integral values have none."""

    if not math.isfinite(value):
        return MISSING_LABEL
    rounded = round(value, 3)
    if float(rounded).is_integer():
        return str(int(rounded))
    return repr(float(rounded))


def format_value(target: MetricDefinition | ValueFormat, value: float) -> str:
    value_format = target.value_format if isinstance(target, MetricDefinition) else target
    label = format_number(value)
    if value_format.kind == "suffix" and label != MISSING_LABEL:
        return f"{label}{value_format.unit}"
    return label


__all__ = [
    "MISSING_LABEL",
    "extract_cluster",
    "extract_value",
    "format_number",
    "format_value",
    "to_finite_number",
]
