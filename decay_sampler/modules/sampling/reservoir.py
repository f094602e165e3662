"""
Exponentially decaying weighted reservoir (forward decay + A-ES priority sampling)
- Goal: keep a bounded, representative sample of an unbounded stream, biased towards
  recent items, from which quantiles/mean/stddev can be read at any time
- Per update:
  - weight = exp(alpha * seconds since epoch)  (forward decay, see decay.py)
  - priority = weight / u, u ~ Uniform(0, 1) exclusive of 0
  - keep the `size` largest priorities: a min-heap of keys gives the weakest sample
    in O(1), insertion/eviction costs O(log size)
- Rescale: weights grow as exp(alpha * t), so once an hour every key and weight is
  multiplied by exp(-alpha * elapsed) and the epoch moves to now. Order is preserved;
  keys that underflow to the same value collapse into one sample.
- Rescale also happens early when alpha * elapsed would leave the safe exponent range
  (large |alpha|), so weights and priorities stay finite.
- Timestamps must be non-decreasing. An earlier timestamp is clamped to the latest one
  seen (default) or raises ClockOrderingViolation when strict_clock=True.

Single writer: update/update_at/snapshot must be serialized by the caller when shared
between threads.
"""

import heapq
import logging
import math
import numbers
from typing import Any, Dict, List, Optional

from decay_sampler.pipeline.types import Priority, WeightedSample
from decay_sampler.modules.sampling.decay import DEFAULT_ALPHA, ExponentialDecay, seconds_between
from decay_sampler.modules.sampling.errors import ClockOrderingViolation, InvalidConfiguration
from decay_sampler.modules.sampling.snapshot import Snapshot
from decay_sampler.modules.sources.clock import Clock, MonotonicClock
from decay_sampler.modules.sources.random_source import RandomSource, SeededRandom

logger = logging.getLogger(__name__)

# 1028 samples: 99.9% confidence level with a 5% margin of error
DEFAULT_SIZE = 1028
RESCALE_INTERVAL = 60.0 * 60.0  # seconds


class Reservoir:
    def __init__(
        self,
        size: int = DEFAULT_SIZE,
        alpha: float = DEFAULT_ALPHA,
        clock: Optional[Clock] = None,
        rng: Optional[RandomSource] = None,
        decay: Optional[ExponentialDecay] = None,
        start_time: Optional[float] = None,
        strict_clock: bool = False,
    ):
        """
        size: number of samples retained; larger is more accurate but costs memory
        alpha: decay factor, larger biases harder towards new values (ignored if decay is given)
        clock: time source for update(); defaults to the monotonic process clock
        rng: uniform (0, 1) source; defaults to a private generator seeded from entropy
        decay: weight function, defaults to ExponentialDecay(alpha)
        start_time: initial epoch; defaults to clock.now()
        strict_clock: raise on out-of-order timestamps instead of clamping them
        """
        if isinstance(size, bool) or not isinstance(size, numbers.Integral) or size <= 0:
            raise InvalidConfiguration(f"reservoir size must be a positive integer, got {size!r}")
        if not isinstance(strict_clock, bool):
            raise InvalidConfiguration(f"strict_clock must be a boolean, got {strict_clock!r}")
        if decay is None:
            try:
                alpha = float(alpha)
            except (TypeError, ValueError) as e:
                raise InvalidConfiguration(f"alpha must be a number, got {alpha!r}") from e
            if not math.isfinite(alpha):
                raise InvalidConfiguration(f"alpha must be finite, got {alpha!r}")
            decay = ExponentialDecay(alpha)

        self.k = int(size)
        self._decay = decay
        self._clock = clock if clock is not None else MonotonicClock()
        self._rng = rng if rng is not None else SeededRandom()
        self._strict_clock = strict_clock

        # priority -> sample; _heap holds exactly the keys of _samples
        self._samples: Dict[Priority, WeightedSample] = {}
        self._heap: List[Priority] = []
        self._count = 0

        start = self._clock.now() if start_time is None else float(start_time)
        self._start_time = start
        self._next_rescale = start + RESCALE_INTERVAL
        self._last_timestamp = start

    @classmethod
    def from_config(
        cls,
        cfg: Dict[str, Any],
        clock: Optional[Clock] = None,
        rng: Optional[RandomSource] = None,
    ) -> "Reservoir":
        """
        Build from the `reservoir` section of a config dict:
        reservoir: { size: 1028, alpha: 0.015, seed: null, strict_clock: false }
        """
        section = (cfg or {}).get("reservoir", {}) or {}
        if not isinstance(section, dict):
            raise InvalidConfiguration("config section 'reservoir' must be a mapping")
        seed = section.get("seed", None)
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, numbers.Integral)):
            raise InvalidConfiguration(f"reservoir seed must be an integer or null, got {seed!r}")
        if rng is None:
            rng = SeededRandom(seed)
        # size/alpha/strict_clock are validated by the constructor, no coercion here
        return cls(
            size=section.get("size", DEFAULT_SIZE),
            alpha=section.get("alpha", DEFAULT_ALPHA),
            clock=clock,
            rng=rng,
            strict_clock=section.get("strict_clock", False),
        )

    # -------------------------- Properties -------------------------- #
    @property
    def size(self) -> int:
        return self.k

    @property
    def alpha(self) -> Optional[float]:
        return getattr(self._decay, "alpha", None)

    @property
    def count(self) -> int:
        return self._count

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def next_rescale_time(self) -> float:
        return self._next_rescale

    def __len__(self) -> int:
        return len(self._samples)

    # -------------------------- Updates -------------------------- #
    def update(self, value: int) -> None:
        """Insert a value at the clock's current time."""
        self.update_at(self._clock.now(), value)

    def update_at(self, timestamp: float, value: int) -> None:
        """Insert a value at an explicit timestamp (seconds, same base as the clock)."""
        timestamp = self._check_ordering(float(timestamp))
        if timestamp >= self._next_rescale or self._decay.exceeds(
            seconds_between(self._start_time, timestamp)
        ):
            self._rescale(timestamp)
        self._last_timestamp = timestamp
        self._count += 1

        item_weight = self._decay.weight(seconds_between(self._start_time, timestamp))
        priority = Priority(item_weight / self._rng.sample_open01())
        sample = WeightedSample(value=int(value), weight=item_weight)

        if len(self._heap) < self.k:
            if priority not in self._samples:
                heapq.heappush(self._heap, priority)
            self._samples[priority] = sample
            return

        first = self._heap[0]
        if first < priority:
            if priority in self._samples:
                # exact tie with a live key: overwrite, nothing to evict
                self._samples[priority] = sample
            else:
                heapq.heapreplace(self._heap, priority)
                del self._samples[first]
                self._samples[priority] = sample

    def _check_ordering(self, timestamp: float) -> float:
        last = self._last_timestamp
        if timestamp < last:
            if self._strict_clock:
                raise ClockOrderingViolation(timestamp, last)
            logger.debug("clamping out-of-order timestamp %.6f to %.6f", timestamp, last)
            return last
        return timestamp

    def _rescale(self, now: float) -> None:
        factor = self._decay.scale(seconds_between(self._start_time, now))

        # ascending order: on a collapse the highest pre-rescale priority wins
        rescaled: Dict[Priority, WeightedSample] = {}
        for key in sorted(self._samples):
            s = self._samples[key]
            rescaled[key.scaled(factor)] = WeightedSample(value=s.value, weight=s.weight * factor)

        # state only moves once every key has been rescaled
        logger.debug(
            "rescaled reservoir: factor=%g retained=%d collapsed=%d",
            factor, len(rescaled), len(self._samples) - len(rescaled),
        )
        self._start_time = now
        self._next_rescale = now + RESCALE_INTERVAL
        self._samples = rescaled
        self._heap = list(rescaled)
        heapq.heapify(self._heap)

    # -------------------------- Snapshot -------------------------- #
    def snapshot(self) -> Snapshot:
        """Immutable view of the current sample; does not modify the reservoir."""
        ordered = (self._samples[key] for key in sorted(self._samples))
        return Snapshot.from_samples(ordered, self._count)

    def __repr__(self) -> str:
        return f"Reservoir(size={self.k}, alpha={self.alpha}, count={self._count}, retained={len(self)})"
