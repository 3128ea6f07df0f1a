"""
Tests for the negotiation engine.
Run with: pytest tests/test_protocol.py -v
"""

import numpy as np
import pytest

import asset_swap.protocol as protocol
from asset_swap.enumeration import iter_candidates
from asset_swap.models import AssetLayout, ConfigurationError, ValuationTable
from asset_swap.protocol import BatchSwapRunner, NegotiationEngine, negotiate
from asset_swap.recording import ScanRecorder
from asset_swap.scoring import score
from asset_swap.utilities import random_valuations


def branching_scan(layout, valuation):
    """Straightforward if-based scan used as a reference for the engine."""
    candidates = iter_candidates(layout.initial_allocation())
    _, leader = next(candidates)
    leader_score = score(leader, valuation)
    for _, candidate in candidates:
        s = score(candidate, valuation)
        if s.party0 >= leader_score.party0 and s.party1 >= leader_score.party1:
            leader, leader_score = candidate, s
    return leader.tolist(), leader_score


# ===== SCENARIOS =====

class TestScenarios:

    def test_no_conflict_keeps_initial_allocation(self, no_conflict):
        layout, valuation = no_conflict
        outcome = negotiate(layout, valuation)
        assert outcome.allocation == [0, 0, 0, 1, 1]
        assert outcome.swapped_assets() == []
        assert outcome.leader_changes == 0
        assert outcome.final_score == outcome.initial_score

    def test_card_trade_follows_canonical_order(self, card_trade):
        """Party 1 keeps its favourite original asset (index 2)."""
        layout, valuation = card_trade
        outcome = negotiate(layout, valuation)
        assert outcome.allocation == [1, 0, 1, 0, 0, 0]
        assert outcome.final_score.to_dict() == {"party0": 120, "party1": 1008}
        assert outcome.initial_score.to_dict() == {"party0": 100, "party1": 23}
        assert outcome.leader_changes == 3

    def test_card_trade_leader_trajectory(self, card_trade):
        layout, valuation = card_trade
        outcome = negotiate(layout, valuation, record=True)
        accepted = [step.k for step in outcome.transcript if step.accepted]
        assert accepted == [0, 31, 47, 59]
        assert len(outcome.transcript) == 64

    def test_swap_everything_is_also_mutually_improving(self, card_trade):
        """The full swap weakly improves on the start but is passed over by the scan."""
        layout, valuation = card_trade
        full_swap = np.array([1, 0, 0, 0, 0, 0], dtype=np.int8)
        initial = score(layout.initial_allocation(), valuation)
        assert score(full_swap, valuation).weakly_dominates(initial)
        assert negotiate(layout, valuation).allocation != full_swap.tolist()

    @pytest.mark.parametrize("n0,n1", [(0, 3), (3, 0), (0, 0)])
    def test_single_owner_layouts(self, n0, n1):
        layout = AssetLayout(n0=n0, n1=n1)
        values = [1, 2, 3][:layout.n]
        valuation = ValuationTable(party0=values, party1=values[::-1])
        outcome = negotiate(layout, valuation)
        assert outcome.candidates_scanned == 2 ** layout.n
        assert outcome.allocation == layout.initial_allocation().tolist()

    def test_empty_layout(self):
        outcome = negotiate(AssetLayout(n0=0, n1=0), ValuationTable(party0=[], party1=[]))
        assert outcome.allocation == []
        assert outcome.candidates_scanned == 1
        assert outcome.leader_changes == 0


# ===== ACCEPTANCE RULE =====

class TestAcceptanceRule:

    def test_exact_tie_replaces_leader(self, mirrored_tie):
        layout, valuation = mirrored_tie
        outcome = negotiate(layout, valuation)
        assert outcome.final_score == outcome.initial_score
        assert outcome.allocation == [1, 0]
        assert outcome.leader_changes == 1

    def test_sideways_moves_chain(self):
        """Each exact tie takes over, so the last tying candidate wins."""
        layout = AssetLayout(n0=1, n1=2)
        valuation = ValuationTable(party0=[5, 5, 0], party1=[5, 5, 0])
        outcome = negotiate(layout, valuation, record=True)
        accepted = [s.k for s in outcome.transcript if s.accepted]
        assert accepted == [0, 3, 4, 7]
        assert outcome.allocation == [1, 0, 0]
        assert outcome.allocation == branching_scan(layout, valuation)[0]

    def test_no_leader_worse_than_start(self, card_trade):
        layout, valuation = card_trade
        outcome = negotiate(layout, valuation, record=True)
        for step in outcome.transcript:
            assert step.leader_score.weakly_dominates(outcome.initial_score)

    @pytest.mark.parametrize("seed", range(25))
    def test_matches_branching_reference(self, seed):
        rng = np.random.default_rng(seed)
        layout = AssetLayout(n0=int(rng.integers(0, 4)), n1=int(rng.integers(0, 4)))
        valuation = random_valuations(layout, rng, low=-5, high=6)
        expected_alloc, expected_score = branching_scan(layout, valuation)
        outcome = negotiate(layout, valuation)
        assert outcome.allocation == expected_alloc
        assert outcome.final_score == expected_score

    @pytest.mark.parametrize("seed", range(25))
    def test_individually_rational(self, seed):
        rng = np.random.default_rng(1000 + seed)
        layout = AssetLayout(n0=3, n1=3)
        valuation = random_valuations(layout, rng, low=-20, high=50)
        outcome = negotiate(layout, valuation)
        assert outcome.final_score.party0 >= outcome.initial_score.party0
        assert outcome.final_score.party1 >= outcome.initial_score.party1


# ===== ENGINE SHAPE =====

class TestEngine:

    def test_scan_shape_independent_of_values(self, monkeypatch):
        """Every negotiation of n assets scores exactly 2**n candidates."""
        calls = []

        def counting_score(allocation, valuation):
            calls.append(1)
            return score(allocation, valuation)

        monkeypatch.setattr(protocol, "score", counting_score)
        layout = AssetLayout(n0=2, n1=2)
        counts = []
        for valuation in (
            ValuationTable(party0=[0, 0, 0, 0], party1=[0, 0, 0, 0]),
            ValuationTable(party0=[9, -3, 7, 100], party1=[1, 50, -2, 4]),
            ValuationTable(party0=[1, 1, 1, 1], party1=[1, 1, 1, 1]),
        ):
            calls.clear()
            negotiate(layout, valuation)
            counts.append(len(calls))
        assert counts == [16, 16, 16]

    def test_recorder_sees_every_candidate(self, no_conflict):
        layout, valuation = no_conflict
        recorder = ScanRecorder()
        outcome = NegotiationEngine(layout, valuation, recorder=recorder).run()
        assert len(recorder) == 32
        assert [s.k for s in recorder.transcript()] == list(range(32))
        assert [s.k for s in recorder.accepted_steps()] == [0]
        assert outcome.transcript == recorder.transcript()

    def test_no_transcript_by_default(self, no_conflict):
        outcome = negotiate(*no_conflict)
        assert outcome.transcript is None

    def test_layout_mismatch_rejected(self):
        with pytest.raises(ConfigurationError):
            NegotiationEngine(AssetLayout(n0=1, n1=1),
                              ValuationTable(party0=[1, 2, 3], party1=[1, 2, 3]))

    def test_repeated_runs_are_identical(self, card_trade):
        engine = NegotiationEngine(*card_trade)
        assert engine.run().allocation == engine.run().allocation


class TestBatchSwapRunner:

    def test_batch_is_reproducible(self):
        layout = AssetLayout(n0=2, n1=2)
        first = BatchSwapRunner(layout, seed=7).run_batch(5)
        second = BatchSwapRunner(layout, seed=7).run_batch(5)
        assert [o.allocation for o in first] == [o.allocation for o in second]

    def test_analyze_results(self):
        runner = BatchSwapRunner(AssetLayout(n0=2, n1=2), seed=3)
        runner.run_batch(10)
        summary = runner.analyze_results()
        assert summary["count"] == 10
        assert 0.0 <= summary["swap_rate"] <= 1.0
        assert summary["avg_gain_party0"] >= 0
        assert summary["avg_gain_party1"] >= 0
