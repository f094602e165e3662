"""
Turn a Snapshot into a flat SnapshotStats record for the reporting sinks.
Quantile keys are named pNN (0.5 -> "p50", 0.999 -> "p99.9").
"""

from typing import Iterable

from decay_sampler.pipeline.types import SnapshotStats
from decay_sampler.modules.sampling.snapshot import Snapshot

DEFAULT_QUANTILES = (0.5, 0.75, 0.95, 0.98, 0.99, 0.999)


def quantile_label(q: float) -> str:
    return "p" + f"{float(q) * 100.0:.4f}".rstrip("0").rstrip(".")


def summarize(snapshot: Snapshot, quantiles: Iterable[float] = DEFAULT_QUANTILES) -> SnapshotStats:
    return SnapshotStats(
        count=snapshot.count(),
        size=len(snapshot),
        min=snapshot.min(),
        max=snapshot.max(),
        mean=snapshot.mean(),
        stddev=snapshot.stddev(),
        quantiles={quantile_label(q): snapshot.value(q) for q in quantiles},
    )
