#!/usr/bin/env python3
from __future__ import annotations

import argparse

from asset_swap.cli import build_inputs, load_config
from asset_swap.models import SwapConfig
from asset_swap.protocol import negotiate


def main() -> None:
    p = argparse.ArgumentParser(description="Negotiate a single asset swap")
    p.add_argument("--config", help="YAML scenario path", default=None)
    args = p.parse_args()

    if args.config:
        cfg = load_config(args.config)
    else:
        # Built-in default scenario
        cfg = SwapConfig(
            name="card_trade",
            party0={"name": "Alice", "assets": 1, "valuations": [100, 30, 30, 30, 30, 30]},
            party1={"name": "Bob", "assets": 5, "valuations": [1000, 6, 8, 3, 5, 1]},
        )

    layout, valuation = build_inputs(cfg)
    outcome = negotiate(layout, valuation)

    print("scenario:", cfg.name)
    print("allocation:", outcome.allocation)
    print("swapped:", outcome.swapped_assets())
    for party, name in enumerate(cfg.party_names()):
        print(f"{name}: {outcome.initial_score[party]} -> {outcome.final_score[party]}")


if __name__ == "__main__":
    main()
