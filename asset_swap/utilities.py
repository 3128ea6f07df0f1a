"""
Analysis helpers for asset swap negotiations.
Includes individual rationality, Pareto checks and random valuation generation.

None of these helpers take part in the negotiation itself; they are
plaintext diagnostics that inspect a finished outcome or the space of
candidates. All comparisons are component-wise between scores.
"""

from typing import Dict, List, Optional, Sequence

import numpy as np
from numpy.random import Generator, default_rng

from .enumeration import iter_candidates
from .models import AssetLayout, NegotiationOutcome, Score, ValuationTable
from .scoring import score


# ===== OUTCOME CHECKS =====

def is_individually_rational(outcome: NegotiationOutcome) -> bool:
    """Check that no party ends up worse off than with the initial allocation.

    Args:
        outcome: Finished negotiation.

    Returns:
        bool: ``True`` when the final score weakly dominates the initial one.
    """

    return outcome.final_score.weakly_dominates(outcome.initial_score)


def is_pareto_optimal(allocation: Sequence[int],
                      layout: AssetLayout,
                      valuation: ValuationTable) -> bool:
    """Check whether any allocation strictly dominates the given one.

    Args:
        allocation: Owner label for every asset.
        layout: Public asset counts.
        valuation: Both parties' valuation vectors.

    Returns:
        bool: ``True`` if no allocation is at least as good for both parties
        and strictly better for one of them.

    Side Effects:
        None. Visits all ``2**n`` allocations.
    """

    target = score(np.asarray(allocation, dtype=np.int8), valuation)
    for _, candidate in iter_candidates(layout.initial_allocation()):
        if score(candidate, valuation).strictly_dominates(target):
            return False
    return True


# ===== CANDIDATE SPACE =====

def mutually_improving_candidates(layout: AssetLayout,
                                  valuation: ValuationTable) -> List[int]:
    """List candidate indices whose score weakly dominates the initial score.

    Index 0 (the initial allocation) is always included.
    """

    initial = layout.initial_allocation()
    baseline = score(initial, valuation)
    return [
        k for k, candidate in iter_candidates(initial)
        if score(candidate, valuation).weakly_dominates(baseline)
    ]


def analyze_allocation_space(layout: AssetLayout,
                             valuation: ValuationTable) -> Dict[str, object]:
    """Census of the candidate space for one pair of valuation tables.

    Args:
        layout: Public asset counts.
        valuation: Both parties' valuation vectors.

    Returns:
        Dict[str, object]: Candidate count, indices of mutually improving
        candidates, the Pareto-optimal ones among them, and the best score
        each party could reach on its own among improving candidates.
    """

    initial = layout.initial_allocation()
    baseline = score(initial, valuation)
    improving: List[int] = []
    scores: Dict[int, Score] = {}

    for k, candidate in iter_candidates(initial):
        s = score(candidate, valuation)
        if s.weakly_dominates(baseline):
            improving.append(k)
            scores[k] = s

    pareto = [
        k for k in improving
        if not any(scores[j].strictly_dominates(scores[k]) for j in improving)
    ]

    return {
        "candidates": 1 << layout.n,
        "initial_score": baseline,
        "mutually_improving": improving,
        "pareto_improving": pareto,
        "best_party0": max(scores[k].party0 for k in improving),
        "best_party1": max(scores[k].party1 for k in improving),
    }


# ===== VALUATION GENERATION =====

def random_valuations(layout: AssetLayout,
                      rng: Optional[Generator] = None,
                      low: int = 0,
                      high: int = 100) -> ValuationTable:
    """Draw independent integer valuations in ``[low, high)`` for both parties."""
    rng = default_rng() if rng is None else rng
    return ValuationTable(
        party0=rng.integers(low, high, size=layout.n),
        party1=rng.integers(low, high, size=layout.n),
    )
