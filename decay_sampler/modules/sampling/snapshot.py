"""
Snapshot: immutable, value-sorted view of a decaying reservoir

Construction (Snapshot.from_samples)
- Copy (value, weight) pairs, stable-sort by value only
- Normalize weights so they sum to 1.0
- quantile of each entry = exclusive running sum of normalized weights (first entry is 0)

Queries
- value(q): weighted quantile lookup by binary search over entry quantiles
- min/max/mean/stddev/count
- values(): (distinct value, aggregated weight) pairs, ascending
"""

import bisect
import itertools
import math
from typing import Iterable, Iterator, List, Tuple

from decay_sampler.pipeline.types import SnapshotEntry, WeightedSample
from decay_sampler.modules.sampling.errors import InvalidArgument


class Snapshot:
    def __init__(self, entries: Iterable[SnapshotEntry], count: int):
        self._entries: Tuple[SnapshotEntry, ...] = tuple(entries)
        self._quantiles: List[float] = [e.quantile for e in self._entries]
        self._count = int(count)

    @classmethod
    def from_samples(cls, samples: Iterable[WeightedSample], count: int) -> "Snapshot":
        """
        Build a snapshot from raw weighted samples.
        `samples` should arrive in a deterministic order (the reservoir passes them in
        priority order); equal values keep that order after the sort.
        """
        pairs = sorted(((s.value, s.weight) for s in samples), key=lambda p: p[0])
        if not pairs:
            return cls((), count)

        total = math.fsum(w for _, w in pairs)
        if total > 0.0:
            norm = [w / total for _, w in pairs]
        else:
            # every weight underflowed to zero; fall back to a uniform sample
            norm = [1.0 / len(pairs)] * len(pairs)

        entries: List[SnapshotEntry] = []
        acc = 0.0
        for (value, _), w in zip(pairs, norm):
            entries.append(SnapshotEntry(value=value, norm_weight=w, quantile=acc))
            acc += w
        return cls(entries, count)

    @property
    def entries(self) -> Tuple[SnapshotEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def value(self, quantile: float) -> int:
        """
        Value at `quantile` (0.5 is the weighted median), or 0 if the snapshot is empty.
        Raises InvalidArgument when quantile is not within [0, 1].
        """
        q = float(quantile)
        if not (0.0 <= q <= 1.0):
            raise InvalidArgument(f"quantile must be within [0, 1], got {quantile!r}")
        if not self._entries:
            return 0

        # first entry whose quantile >= q (exact match or insertion point)
        idx = bisect.bisect_left(self._quantiles, q)
        if idx >= len(self._entries):
            idx = len(self._entries) - 1
        return self._entries[idx].value

    def min(self) -> int:
        return self._entries[0].value if self._entries else 0

    def max(self) -> int:
        return self._entries[-1].value if self._entries else 0

    def mean(self) -> float:
        return math.fsum(float(e.value) * e.norm_weight for e in self._entries)

    def stddev(self) -> float:
        """Weighted population standard deviation; 0 for fewer than two entries."""
        if len(self._entries) <= 1:
            return 0.0
        mean = self.mean()
        variance = math.fsum(e.norm_weight * (float(e.value) - mean) ** 2 for e in self._entries)
        return math.sqrt(variance)

    def count(self) -> int:
        """Number of updates the reservoir had accepted when the snapshot was taken."""
        return self._count

    def values(self) -> Iterator[Tuple[int, float]]:
        for value, group in itertools.groupby(self._entries, key=lambda e: e.value):
            yield value, math.fsum(e.norm_weight for e in group)

    def __repr__(self) -> str:
        return f"Snapshot(count={self._count}, size={len(self._entries)})"
