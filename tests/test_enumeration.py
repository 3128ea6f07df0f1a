"""
Tests for the canonical candidate order.
"""

import numpy as np
import pytest

from asset_swap.enumeration import (
    DeltaEnumerator,
    delta_for,
    initial_allocation,
    iter_candidates,
)


class TestDeltaEnumerator:

    def test_delta_bits_are_little_endian(self):
        """Bit i of k flips asset i; asset 0 is the least significant bit."""
        assert delta_for(0, 3).tolist() == [0, 0, 0]
        assert delta_for(1, 3).tolist() == [1, 0, 0]
        assert delta_for(6, 3).tolist() == [0, 1, 1]
        assert delta_for(7, 3).tolist() == [1, 1, 1]

    @pytest.mark.parametrize("n", [0, 1, 4, 7])
    def test_kth_delta_is_binary_of_k(self, n):
        deltas = list(DeltaEnumerator(n))
        assert len(deltas) == 2 ** n
        for k, delta in enumerate(deltas):
            assert int(sum(int(b) << i for i, b in enumerate(delta))) == k

    def test_first_delta_is_all_zero(self):
        first = next(iter(DeltaEnumerator(5)))
        assert not first.any()

    def test_restartable(self):
        enum = DeltaEnumerator(3)
        first_pass = [d.tolist() for d in enum]
        second_pass = [d.tolist() for d in enum]
        assert first_pass == second_pass
        assert len(enum) == 8

    def test_large_n_is_streamed(self):
        """Only the requested prefix is materialized."""
        it = iter(DeltaEnumerator(64))
        assert next(it).tolist() == [0] * 64
        assert next(it).tolist() == [1] + [0] * 63

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            delta_for(8, 3)
        with pytest.raises(ValueError):
            DeltaEnumerator(-1)


class TestCandidates:

    def test_candidate_zero_is_initial_allocation(self):
        initial = initial_allocation(2, 2)
        k, candidate = next(iter_candidates(initial))
        assert k == 0
        assert np.array_equal(candidate, initial)

    def test_candidates_xor_initial(self):
        initial = initial_allocation(1, 2)
        got = [(k, c.tolist()) for k, c in iter_candidates(initial)]
        assert got[:4] == [
            (0, [0, 1, 1]),
            (1, [1, 1, 1]),
            (2, [0, 0, 1]),
            (3, [1, 0, 1]),
        ]
        assert got[-1] == (7, [1, 0, 0])

    def test_every_allocation_visited_once(self):
        initial = initial_allocation(2, 3)
        seen = {tuple(c.tolist()) for _, c in iter_candidates(initial)}
        assert len(seen) == 32

    def test_empty_layout_has_single_candidate(self):
        assert [(k, c.tolist()) for k, c in iter_candidates(initial_allocation(0, 0))] == [(0, [])]
