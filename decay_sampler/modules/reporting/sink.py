"""
Reporting / export sinks for snapshot summaries

Purpose
- Hand SnapshotStats to the outside world: JSONL file or stdout
- The sampler itself never does I/O; sinks only read summaries built from snapshots

Implementation
- SnapshotSink: common write_snapshot(stats, label) interface
- JSONLSink: one JSON object per line, appended
- StdoutSink: print for local runs
- build_sinks_from_config: build the sink list from the `reporting.sinks` config
"""

from __future__ import annotations
from dataclasses import asdict
from typing import List, Dict, Any
import json
import logging
import os
import threading
import time

from decay_sampler.pipeline.types import SnapshotStats

logger = logging.getLogger(__name__)


def _to_jsonable(stats: SnapshotStats, label: str) -> Dict[str, Any]:
    row = asdict(stats)
    row["label"] = label
    return row


class SnapshotSink:
    def write_snapshot(self, stats: SnapshotStats, label: str) -> None:
        raise NotImplementedError


class JSONLSink(SnapshotSink):
    def __init__(self, path: str, ensure_dir: bool = True):
        self.path = path
        if ensure_dir:
            d = os.path.dirname(os.path.abspath(path))
            if d and not os.path.exists(d):
                os.makedirs(d, exist_ok=True)
        self._lock = threading.Lock()

    def write_snapshot(self, stats: SnapshotStats, label: str) -> None:
        row = _to_jsonable(stats, label)
        row["write_ts"] = time.time()
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(json.dumps(row, ensure_ascii=False) + "\n")


class StdoutSink(SnapshotSink):
    def write_snapshot(self, stats: SnapshotStats, label: str) -> None:
        print(f"[snapshot] {label} count={stats.count} size={stats.size}")
        print("  -", json.dumps(_to_jsonable(stats, label), ensure_ascii=False))


def build_sinks_from_config(cfg: Dict[str, Any]) -> List[SnapshotSink]:
    """
    Example:
    reporting:
      sinks:
        - type: "jsonl"
          path: "out/snapshots.jsonl"
        - type: "stdout"
    """
    out: List[SnapshotSink] = []
    reporting = (cfg or {}).get("reporting", {}) or {}
    sinks = reporting.get("sinks", []) or []
    for s in sinks:
        t = (s.get("type") or "").lower()
        if t == "jsonl":
            out.append(JSONLSink(path=s["path"]))
        elif t == "stdout":
            out.append(StdoutSink())
        else:
            logger.warning("unknown sink type: %s", t)
    return out
