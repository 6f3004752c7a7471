#!/usr/bin/env python3
"""
Timing harness comparing the pyanf backends:
    - scalar (bit/element-at-a-time butterfly)
    - bitsliced (whole-pass masks for packed ints, reshaped views for NumPy)

Measures latency for packed integers and NumPy tables across numbers of
variables, with warmup/repeats, and checks that both backends agree.
Results can be saved as CSV.

Example:

    python3 tools/compare_backends.py --variables 4 8 12 --repeats 5 --csv build/anf_bench.csv
"""

from __future__ import annotations

import argparse
import csv
import os
import sys
import time
from dataclasses import dataclass, asdict
from typing import Callable, List, Optional


def _repo_root() -> str:
    return os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def _ensure_pyanf_importable() -> None:
    """Prefer importing pyanf from the repo/python path to use local sources."""
    py_path = os.path.join(_repo_root(), "python")
    if py_path not in sys.path:
        sys.path.insert(0, py_path)


@dataclass
class BenchResult:
    representation: str
    backend: str
    num_variables: int
    time_ms: float
    match: bool


def _time_call(fn: Callable[[], object], warmup: int, repeats: int) -> float:
    for _ in range(warmup):
        fn()
    start = time.perf_counter()
    for _ in range(repeats):
        fn()
    return (time.perf_counter() - start) * 1000.0 / max(repeats, 1)


def bench_packed(n: int, warmup: int, repeats: int, seed: int) -> List[BenchResult]:
    import numpy as np
    import pyanf

    rng = np.random.default_rng(seed)
    table = rng.integers(0, 2, 1 << n).astype(bool)
    value = pyanf.pack_table(table)

    reference = pyanf.transform_packed(value, n, backend=pyanf.Backend.SCALAR)
    results = []
    for backend in (pyanf.Backend.SCALAR, pyanf.Backend.BITSLICED):
        ms = _time_call(lambda: pyanf.transform_packed(value, n, backend=backend), warmup, repeats)
        match = pyanf.transform_packed(value, n, backend=backend) == reference
        results.append(BenchResult("packed", pyanf.backend_name(backend), n, ms, match))
    return results


def bench_array(n: int, warmup: int, repeats: int, seed: int) -> List[BenchResult]:
    import numpy as np
    import pyanf

    rng = np.random.default_rng(seed)
    table = rng.integers(0, 2, 1 << n).astype(bool)

    reference = pyanf.compute(table, backend=pyanf.Backend.SCALAR)
    results = []
    for backend in (pyanf.Backend.SCALAR, pyanf.Backend.BITSLICED):
        # Transform is an involution: repeated in-place calls stay on valid input
        work = table.copy()
        ms = _time_call(lambda: pyanf.transform_array(work, backend=backend), warmup, repeats)
        match = bool(np.array_equal(pyanf.compute(table, backend=backend), reference))
        results.append(BenchResult("array", pyanf.backend_name(backend), n, ms, match))
    return results


def write_csv(path: str, results: List[BenchResult]) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=list(asdict(results[0]).keys()))
        writer.writeheader()
        for res in results:
            writer.writerow(asdict(res))


def main(argv: Optional[List[str]] = None) -> int:
    _ensure_pyanf_importable()

    parser = argparse.ArgumentParser(description="Compare pyanf scalar and bit-sliced backends")
    parser.add_argument("--variables", type=int, nargs="*", default=[4, 8, 12],
                        help="Numbers of variables to test (table size 2^n)")
    parser.add_argument("--repeats", type=int, default=10)
    parser.add_argument("--warmup", type=int, default=2)
    parser.add_argument("--seed", type=int, default=0xC0FFEE)
    parser.add_argument("--skip-packed", action="store_true")
    parser.add_argument("--skip-array", action="store_true")
    parser.add_argument("--csv", type=str, default=None, help="Write results to CSV file path")

    args = parser.parse_args(argv)

    sizes = [n for n in args.variables if n >= 0]
    if not sizes:
        print("No valid sizes to test.")
        return 2

    results: List[BenchResult] = []
    for n in sizes:
        if not args.skip_packed:
            results.extend(bench_packed(n, args.warmup, args.repeats, args.seed))
        if not args.skip_array:
            results.extend(bench_array(n, args.warmup, args.repeats, args.seed))

    print(f"{'repr':<8} {'backend':<10} {'n':>3} {'time (ms)':>12}  match")
    print("-" * 44)
    for res in results:
        mark = "✓" if res.match else "✗"
        print(f"{res.representation:<8} {res.backend:<10} {res.num_variables:>3} {res.time_ms:>12.3f}  {mark}")

    if args.csv and results:
        write_csv(args.csv, results)
        print(f"\nWrote {len(results)} rows to {args.csv}")

    return 0 if all(res.match for res in results) else 1


if __name__ == "__main__":
    sys.exit(main())
