from __future__ import annotations

from typing import Iterable, List

from .models import NegotiationOutcome


def summarize_outcomes(outcomes: Iterable[NegotiationOutcome]) -> dict:
    outs: List[NegotiationOutcome] = list(outcomes)
    n = len(outs) or 1
    swaps = sum(1 for o in outs if o.swapped_assets())
    # Gains are averaged per party; the two columns are never combined.
    return {
        "count": len(outs),
        "swap_rate": swaps / n,
        "avg_assets_moved": sum(len(o.swapped_assets()) for o in outs) / n,
        "avg_leader_changes": sum(o.leader_changes for o in outs) / n,
        "avg_gain_party0": sum(o.gain(0) for o in outs) / n,
        "avg_gain_party1": sum(o.gain(1) for o in outs) / n,
    }
