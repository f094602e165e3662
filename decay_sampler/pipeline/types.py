"""
Data types
- Priority: reservoir ordering key, a float that can never be NaN
- WeightedSample: one retained measurement and its decayed weight
- SnapshotEntry: one row of a snapshot (value, normalized weight, cumulative quantile)
- SnapshotStats: flat summary of a snapshot, handed to reporting sinks
"""

import math
from dataclasses import dataclass, field
from typing import Dict


class Priority(float):
    """Float key with a total order: NaN is rejected at construction."""

    __slots__ = ()

    def __new__(cls, value: float) -> "Priority":
        value = float(value)
        if math.isnan(value):
            raise ValueError("priority must not be NaN")
        return super().__new__(cls, value)

    def scaled(self, factor: float) -> "Priority":
        return Priority(float(self) * factor)


@dataclass
class WeightedSample:
    value: int
    weight: float  # decay weight at insertion, rescaled with the reservoir


@dataclass(frozen=True)
class SnapshotEntry:
    value: int
    norm_weight: float  # weight / sum(weights), entries sum to 1.0
    quantile: float     # exclusive prefix sum of norm_weight


@dataclass
class SnapshotStats:
    count: int      # total updates seen by the reservoir
    size: int       # entries in the snapshot
    min: int
    max: int
    mean: float
    stddev: float
    quantiles: Dict[str, int] = field(default_factory=dict)  # e.g. {"p50": 177}
