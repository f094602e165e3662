"""
Micro-benchmarks for the decaying reservoir
- update: insert at the clock's current time
- update_at: insert at a fixed timestamp (no clock call)
- snapshot: build a snapshot of a full default-size reservoir
- now: cost of the monotonic clock itself

Usage:
  python -m decay_sampler.scripts.bench_reservoir --number 100000
"""

import argparse
import timeit

from decay_sampler.modules.sampling.reservoir import DEFAULT_SIZE, Reservoir
from decay_sampler.modules.sources.clock import MonotonicClock


def filled_reservoir() -> Reservoir:
    r = Reservoir()
    for i in range(DEFAULT_SIZE):
        r.update(i)
    return r


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--number", type=int, default=100_000, help="iterations per update benchmark")
    ap.add_argument("--snapshots", type=int, default=1_000, help="iterations for the snapshot benchmark")
    args = ap.parse_args()

    r = filled_reservoir()
    t = timeit.timeit(lambda: r.update(0), number=args.number)
    print(f"update     {t / args.number * 1e9:10.1f} ns/op")

    r = filled_reservoir()
    now = MonotonicClock().now()
    t = timeit.timeit(lambda: r.update_at(now, 0), number=args.number)
    print(f"update_at  {t / args.number * 1e9:10.1f} ns/op")

    r = filled_reservoir()
    t = timeit.timeit(r.snapshot, number=args.snapshots)
    print(f"snapshot   {t / args.snapshots * 1e6:10.1f} us/op")

    clock = MonotonicClock()
    t = timeit.timeit(clock.now, number=args.number)
    print(f"now        {t / args.number * 1e9:10.1f} ns/op")


if __name__ == "__main__":
    main()
