"""
Demo entry point
- Load the YAML config, replay a fake latency stream through the decaying reservoir,
  then summarize the snapshot and write it to the configured sinks
"""
import argparse
import logging
import time
from typing import Any, Dict, Optional

import yaml

from decay_sampler.pipeline.pipeline import SamplingPipeline
from decay_sampler.modules.testing.fake_stream_generator import fake_latency_stream
from decay_sampler.utils.logging import get_logger

DEFAULT_MODES = [
    {"value": 177, "minutes": 120},
    {"value": 9999, "minutes": 10},
]


def load_config(path: str = "configs/config.yaml") -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def main(argv: Optional[list] = None) -> None:
    ap = argparse.ArgumentParser(description="Replay a latency stream through a decaying reservoir")
    ap.add_argument("--config", default="configs/config.yaml", help="path to the YAML config")
    ap.add_argument("--verbose", action="store_true", help="log reservoir rescales")
    args = ap.parse_args(argv)

    log = get_logger("decay_sampler", level=logging.DEBUG if args.verbose else logging.INFO)
    cfg = load_config(args.config)
    pipe = SamplingPipeline(cfg)

    stream_cfg = cfg.get("stream", {}) or {}
    stream = fake_latency_stream(
        stream_cfg.get("modes", DEFAULT_MODES),
        values_per_minute=int(stream_cfg.get("values_per_minute", 10)),
        start=pipe.reservoir.start_time,
        seed=stream_cfg.get("seed", 2026),
    )
    n = pipe.process_stream(stream)
    log.info("replayed %d values, %d retained", n, len(pipe.reservoir))

    label = f"snap-{time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime())}"
    stats = pipe.export_snapshot(label)
    log.info("median=%d p99=%d mean=%.2f stddev=%.2f",
             stats.quantiles.get("p50", 0), stats.quantiles.get("p99", 0), stats.mean, stats.stddev)


if __name__ == "__main__":
    main()
