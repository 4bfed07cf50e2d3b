# scripts/bench_adam_step_f32_vs_f64.py
"""
Microbench: one Adam step (float32 vs float64).

What it measures
----------------
- Per-step latency of `Adam.step` for a parameter of the given size, with a
  stub evaluation function that returns a precomputed gradient.
- Uses warmup iterations (not recorded), then repeats with median/p95.

Notes
-----
- The evaluation function does no work, so timings are the optimizer's own
  cost: config resolution, scratch allocation and five in-place tensor passes.

Example
-------
python -O scripts/bench_adam_step_f32_vs_f64.py --numel 1000000 --warmup 20 --repeats 100
"""

from __future__ import annotations

import argparse
import logging
import math
import statistics
import time
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

import os
import sys

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from keyoptim import Adam, T, Tensor  # noqa: E402

logger = logging.getLogger("bench_adam_step")


# ----------------------------
# Stats helpers
# ----------------------------
def _median(xs: Sequence[float]) -> float:
    return statistics.median(xs) if xs else float("nan")


def _p95(xs: Sequence[float]) -> float:
    if not xs:
        return float("nan")
    ys = sorted(xs)
    k = int(math.ceil(0.95 * len(ys))) - 1
    k = max(0, min(k, len(ys) - 1))
    return ys[k]


def _fmt_ms(sec: float) -> str:
    return f"{sec * 1e3:8.3f} ms"


@dataclass
class StepResult:
    dtype: str
    med: float
    p95: float


# ----------------------------
# Bench core
# ----------------------------
def _time_steps(numel: int, dtype, *, warmup: int, repeats: int, seed: int) -> StepResult:
    rng = np.random.default_rng(seed)
    x = Tensor.from_numpy(rng.standard_normal(numel).astype(dtype), dtype=dtype)
    g = Tensor.from_numpy(rng.standard_normal(numel).astype(dtype), dtype=dtype)

    def feval(_p):
        return 0.0, g

    opt = Adam()
    config, state = T(learningRate=1e-3), T()

    for _ in range(warmup):
        opt.step(feval, x, config, state)

    times: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        opt.step(feval, x, config, state)
        t1 = time.perf_counter()
        times.append(t1 - t0)

    return StepResult(np.dtype(dtype).name, _median(times), _p95(times))


def main() -> None:
    ap = argparse.ArgumentParser(description="Adam step microbenchmark")
    ap.add_argument("--numel", type=int, default=1_000_000)
    ap.add_argument("--warmup", type=int, default=20)
    ap.add_argument("--repeats", type=int, default=100)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s | %(message)s",
    )

    logger.info(
        "numel=%d warmup=%d repeats=%d", args.numel, args.warmup, args.repeats
    )
    for dtype in (np.float32, np.float64):
        r = _time_steps(
            args.numel, dtype, warmup=args.warmup, repeats=args.repeats, seed=args.seed
        )
        print(f"{r.dtype:>8}  med {_fmt_ms(r.med)}  p95 {_fmt_ms(r.p95)}")


if __name__ == "__main__":
    main()
