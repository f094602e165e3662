"""
Sampling pipeline: reservoir + reporting sinks

Purpose
- Wire a decaying Reservoir to a stream of (timestamp, value) measurements and export
  snapshot summaries through the configured sinks.
- Flow per record: update_at(timestamp, value). At export: snapshot -> summarize -> sinks.

Config keys (recommended)
- reservoir: { size: 1028, alpha: 0.015, seed: null, strict_clock: false }
- reporting: { quantiles: [0.5, 0.75, 0.95, 0.99], sinks: see modules/reporting/sink.py }
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from decay_sampler.pipeline.types import SnapshotStats
from decay_sampler.modules.sampling.reservoir import Reservoir
from decay_sampler.modules.sampling.snapshot import Snapshot
from decay_sampler.modules.sources.clock import Clock
from decay_sampler.modules.sources.random_source import RandomSource
from decay_sampler.modules.reporting.sink import SnapshotSink, build_sinks_from_config
from decay_sampler.modules.reporting.summary import DEFAULT_QUANTILES, summarize

logger = logging.getLogger(__name__)


class SamplingPipeline:
    def __init__(
        self,
        config: Dict[str, Any],
        clock: Optional[Clock] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.cfg = config or {}
        self.reservoir = Reservoir.from_config(self.cfg, clock=clock, rng=rng)

        reporting = self.cfg.get("reporting", {}) or {}
        self.quantiles = [float(q) for q in reporting.get("quantiles", DEFAULT_QUANTILES)]
        self.reporting_sinks: List[SnapshotSink] = build_sinks_from_config(self.cfg)

    # -------------------------- Stream processing -------------------------- #
    def process_stream(self, stream: Iterable[Tuple[float, int]]) -> int:
        """Feed (timestamp, value) pairs to the reservoir; returns how many were consumed."""
        n = 0
        for timestamp, value in stream:
            self.reservoir.update_at(timestamp, value)
            n += 1
        return n

    def record(self, value: int) -> None:
        self.reservoir.update(value)

    # -------------------------- Export -------------------------- #
    def snapshot(self) -> Snapshot:
        return self.reservoir.snapshot()

    def get_snapshot_stats(self) -> SnapshotStats:
        return summarize(self.snapshot(), self.quantiles)

    def export_snapshot(self, label: str) -> SnapshotStats:
        """
        Summarize the current snapshot and write it to every sink.
        A failing sink is logged and skipped; the others still receive the stats.
        """
        stats = self.get_snapshot_stats()
        for sink in self.reporting_sinks:
            try:
                sink.write_snapshot(stats, label)
            except OSError as e:
                logger.warning("%s.write_snapshot failed: %s", type(sink).__name__, e)
        return stats
