"""Configuration helpers for the metric catalog."""

from .catalog import (
    DEFAULT_CATALOG,
    ClusterDefinition,
    FieldSource,
    MaxOfFieldsSource,
    MetricCatalog,
    MetricDefinition,
    ValueFormat,
    get_metric,
    iter_clusters,
    iter_metrics,
    source_fields,
    subset,
)

__all__ = [
    "DEFAULT_CATALOG",
    "ClusterDefinition",
    "FieldSource",
    "MaxOfFieldsSource",
    "MetricCatalog",
    "MetricDefinition",
    "ValueFormat",
    "get_metric",
    "iter_clusters",
    "iter_metrics",
    "source_fields",
    "subset",
]
