"""Tests for snapshot order statistics."""

import math

import pytest

from decay_sampler.pipeline.types import Priority, WeightedSample
from decay_sampler.modules.sampling.errors import InvalidArgument
from decay_sampler.modules.sampling.reservoir import Reservoir
from decay_sampler.modules.sampling.snapshot import Snapshot
from decay_sampler.modules.sources.clock import ManualClock
from decay_sampler.modules.sources.random_source import SeededRandom


def snapshot_of(pairs, count=None):
    samples = [WeightedSample(value=v, weight=w) for v, w in pairs]
    return Snapshot.from_samples(samples, len(samples) if count is None else count)


def test_values_merges_duplicates():
    r = Reservoir(size=100, alpha=0.015, clock=ManualClock(), rng=SeededRandom(5))
    for v in (1, 1, 1, 10):
        r.update(v)

    assert list(r.snapshot().values()) == [(1, 0.75), (10, 0.25)]


def test_values_is_a_fresh_generator_per_call():
    snap = snapshot_of([(3, 1.0), (1, 1.0)])
    it = snap.values()
    assert list(it) == [(1, 0.5), (3, 0.5)]
    assert list(it) == []
    assert list(snap.values()) == [(1, 0.5), (3, 0.5)]


def test_entries_sorted_by_value_with_exclusive_quantiles():
    snap = snapshot_of([(30, 1.0), (10, 2.0), (20, 1.0)])
    assert [e.value for e in snap.entries] == [10, 20, 30]
    assert [e.norm_weight for e in snap.entries] == [0.5, 0.25, 0.25]
    assert [e.quantile for e in snap.entries] == [0.0, 0.5, 0.75]


def test_normalized_weights_sum_to_one():
    r = Reservoir(size=64, alpha=0.015, clock=ManualClock(), rng=SeededRandom(9))
    for i in range(500):
        r.update_at(float(i), i % 37)
    snap = r.snapshot()
    assert math.fsum(e.norm_weight for e in snap.entries) == pytest.approx(1.0)
    quantiles = [e.quantile for e in snap.entries]
    assert quantiles[0] == 0.0
    assert quantiles == sorted(quantiles)


def test_value_lookup():
    snap = snapshot_of([(1, 1.0), (1, 1.0), (1, 1.0), (10, 1.0)])
    assert snap.value(0.0) == 1
    assert snap.value(0.5) == 1    # exact match on an entry quantile
    assert snap.value(0.6) == 10   # insertion point
    assert snap.value(0.75) == 10
    assert snap.value(1.0) == 10   # past the end, clamped to the last entry


def test_sort_is_by_value_only():
    # equal values keep their incoming order, so the weights line up deterministically
    snap = snapshot_of([(5, 3.0), (5, 1.0), (2, 4.0)])
    assert [(e.value, e.norm_weight) for e in snap.entries] == [(2, 0.5), (5, 0.375), (5, 0.125)]


@pytest.mark.parametrize("q", [-0.01, 1.01, float("nan")])
def test_value_rejects_out_of_range_quantile(q):
    snap = snapshot_of([(1, 1.0)])
    with pytest.raises(InvalidArgument):
        snap.value(q)


@pytest.mark.parametrize("q", [-1.0, 2.0])
def test_value_rejects_out_of_range_quantile_when_empty(q):
    with pytest.raises(InvalidArgument):
        snapshot_of([]).value(q)


def test_empty_snapshot_defaults():
    snap = snapshot_of([], count=0)
    assert len(snap) == 0
    for q in (0.0, 0.5, 1.0):
        assert snap.value(q) == 0
    assert snap.min() == 0
    assert snap.max() == 0
    assert snap.mean() == 0.0
    assert snap.stddev() == 0.0
    assert snap.count() == 0
    assert list(snap.values()) == []


def test_min_max_mean_stddev():
    snap = snapshot_of([(3, 1.0), (1, 1.0)])
    assert snap.min() == 1
    assert snap.max() == 3
    assert snap.mean() == pytest.approx(2.0)
    assert snap.stddev() == pytest.approx(1.0)


def test_weighted_mean_and_stddev():
    snap = snapshot_of([(0, 3.0), (4, 1.0)])
    assert snap.mean() == pytest.approx(1.0)
    # variance = 0.75 * 1 + 0.25 * 9 = 3
    assert snap.stddev() == pytest.approx(math.sqrt(3.0))


def test_stddev_single_entry_is_zero():
    snap = snapshot_of([(42, 1.0)])
    assert snap.stddev() == 0.0
    assert snap.mean() == pytest.approx(42.0)


def test_count_comes_from_reservoir_not_entries():
    snap = snapshot_of([(1, 1.0), (2, 1.0)], count=1_000_000)
    assert snap.count() == 1_000_000
    assert len(snap) == 2


def test_all_zero_weights_fall_back_to_uniform():
    snap = snapshot_of([(1, 0.0), (2, 0.0)])
    assert [e.norm_weight for e in snap.entries] == [0.5, 0.5]


def test_negative_values():
    snap = snapshot_of([(-5, 1.0), (5, 1.0)])
    assert snap.min() == -5
    assert snap.value(0.0) == -5
    assert snap.mean() == pytest.approx(0.0)


def test_snapshot_is_independent_of_later_updates():
    r = Reservoir(size=10, alpha=0.015, clock=ManualClock(), rng=SeededRandom(3))
    r.update(1)
    snap = r.snapshot()
    r.update(2)
    assert len(snap) == 1
    assert snap.count() == 1
    with pytest.raises(AttributeError):
        snap.entries[0].value = 9


def test_priority_rejects_nan():
    with pytest.raises(ValueError):
        Priority(float("nan"))


def test_priority_orders_like_float():
    assert Priority(1.0) < Priority(2.0)
    assert Priority(2.0).scaled(0.5) == Priority(1.0)
    assert isinstance(Priority(2.0).scaled(0.5), Priority)
    with pytest.raises(ValueError):
        Priority(math.inf).scaled(0.0)
