#!/usr/bin/env python3
from __future__ import annotations

import argparse

from asset_swap.codec import layout_from_counts
from asset_swap.protocol import BatchSwapRunner


def main() -> None:
    p = argparse.ArgumentParser(description="Run a batch of swaps over random valuations and print summary metrics")
    p.add_argument("--runs", type=int, default=20)
    p.add_argument("--n0", type=int, default=3)
    p.add_argument("--n1", type=int, default=3)
    p.add_argument("--seed", type=int, default=0)
    args = p.parse_args()

    runner = BatchSwapRunner(layout_from_counts(args.n0, args.n1), seed=args.seed)
    runner.run_batch(args.runs)

    summary = runner.analyze_results()
    for k, v in summary.items():
        print(f"{k}: {v}")


if __name__ == "__main__":
    main()
