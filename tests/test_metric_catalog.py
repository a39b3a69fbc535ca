import pytest

from squadrank.config import (
    DEFAULT_CATALOG,
    MaxOfFieldsSource,
    get_metric,
    iter_clusters,
    iter_metrics,
    subset,
)


def test_catalog_has_thirteen_tests_and_four_clusters():
    assert len(list(iter_metrics())) == 13
    assert [cluster.id for cluster in iter_clusters()] == ["ps", "tc", "ms", "dc"]


def test_timed_tests_are_lower_is_better():
    lower = {metric.id for metric in iter_metrics() if not metric.higher_is_better}
    assert lower == {"agility", "reaction"}


def test_get_metric_normalizes_id():
    metric = get_metric(" Agility ")
    assert metric.source.field == "agility_5_10_5_best_time"
    assert metric.value_format.kind == "suffix"
    assert metric.value_format.unit == "s"


def test_hop_is_derived_from_both_legs():
    hop = get_metric("hop")
    assert isinstance(hop.source, MaxOfFieldsSource)
    assert hop.source.fields == ("single_leg_hop_left", "single_leg_hop_right")


def test_get_metric_missing_raises():
    with pytest.raises(KeyError):
        get_metric("curling")


def test_subset_keeps_requested_order():
    small = subset(["serve", "agility"])
    assert [metric.id for metric in small.tests] == ["serve", "agility"]
    assert small.clusters == DEFAULT_CATALOG.clusters
