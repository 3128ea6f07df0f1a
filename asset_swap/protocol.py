"""
Negotiation engine that drives the exhaustive swap scan.

The engine visits every candidate allocation in canonical order and keeps a
leader. A candidate replaces the leader when it is at least as good for
both parties, each judged by its own valuations (ties replace too). The
replacement is an arithmetic selection, so every iteration performs the same
operations whatever the private values are. There is no pruning and no
early exit: cost is ``O(2**n * n)`` and the practical asset ceiling is
enforced at the input boundary (see ``Settings.MAX_ASSETS``).
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import numpy as np

from .enumeration import iter_candidates
from .evaluation import summarize_outcomes
from .models import (
    AssetLayout,
    ConfigurationError,
    NegotiationOutcome,
    Score,
    ValuationTable,
)
from .recording import ScanRecorder
from .scoring import score
from .utilities import random_valuations

logger = logging.getLogger(__name__)


def select(take: int, candidate, leader):
    """Pick ``candidate`` when ``take`` is 1 and ``leader`` when it is 0."""
    return take * candidate + (1 - take) * leader


class NegotiationEngine:
    """
    Exhaustive mutual-acceptance scan over all allocations.

    - Candidate 0 is the initial allocation and becomes the first leader.
    - Candidates 1 .. 2**n - 1 are scored and compared to the leader.
    - The leader after the last candidate is the outcome.
    """

    def __init__(
        self,
        layout: AssetLayout,
        valuation: ValuationTable,
        recorder: Optional[ScanRecorder] = None,
    ):
        if valuation.n != layout.n:
            raise ConfigurationError(
                f"valuations cover {valuation.n} assets but the layout has {layout.n}"
            )
        self.layout = layout
        self.valuation = valuation
        self.recorder = recorder

    # ---------- Core Run ----------
    def run(self) -> NegotiationOutcome:
        initial = self.layout.initial_allocation()
        logger.debug(
            f"Scanning {1 << self.layout.n} candidates "
            f"({self.layout.n0} + {self.layout.n1} assets)"
        )

        candidates = iter_candidates(initial)
        _, leader = next(candidates)
        leader_score = score(leader, self.valuation)
        initial_score = leader_score
        leader_changes = 0
        scanned = 1
        self._record(0, leader, leader_score, 1, leader_score)

        for k, candidate in candidates:
            candidate_score = score(candidate, self.valuation)
            take = candidate_score.dominance_bit(leader_score)

            leader = select(take, candidate, leader).astype(np.int8)
            leader_score = Score(
                party0=select(take, candidate_score.party0, leader_score.party0),
                party1=select(take, candidate_score.party1, leader_score.party1),
            )
            leader_changes += take
            scanned += 1
            self._record(k, candidate, candidate_score, take, leader_score)

        logger.debug(f"Scan finished after {scanned} candidates")
        return NegotiationOutcome(
            layout=self.layout,
            allocation=[int(x) for x in leader],
            initial_score=initial_score,
            final_score=leader_score,
            candidates_scanned=scanned,
            leader_changes=leader_changes,
            transcript=self.recorder.transcript() if self.recorder is not None else None,
        )

    # ---------- Helpers ----------
    def _record(self, k: int, allocation, candidate_score: Score, take: int,
                leader_score: Score) -> None:
        if self.recorder is not None:
            self.recorder.record_step(k, allocation, candidate_score, take, leader_score)


def negotiate(
    layout: AssetLayout,
    valuation: ValuationTable,
    *,
    record: bool = False,
) -> NegotiationOutcome:
    """Run one negotiation and return its outcome.

    Args:
        layout: Public asset counts of both parties.
        valuation: Private valuation vectors covering every asset.
        record: Keep a per-candidate transcript on the outcome.

    Returns:
        NegotiationOutcome: Final leader allocation with initial and final
        scores.
    """
    recorder = ScanRecorder() if record else None
    return NegotiationEngine(layout, valuation, recorder=recorder).run()


class BatchSwapRunner:
    """Run many independent negotiations over random valuations."""

    def __init__(self, layout: AssetLayout, low: int = 0, high: int = 100, seed: int = 0):
        self.layout = layout
        self.low = low
        self.high = high
        self.seed = seed
        self.results: List[NegotiationOutcome] = []

    def run_one(self, index: int) -> NegotiationOutcome:
        """Negotiate over the valuations drawn for run number ``index``."""
        rng = np.random.default_rng(self.seed + index)
        valuation = random_valuations(self.layout, rng, low=self.low, high=self.high)
        return negotiate(self.layout, valuation)

    def run_batch(self, n_runs: int) -> List[NegotiationOutcome]:
        self.results = [self.run_one(i) for i in range(n_runs)]
        logger.info(f"Batch of {n_runs} negotiations finished")
        return self.results

    def analyze_results(self) -> Dict[str, float]:
        return summarize_outcomes(self.results)
