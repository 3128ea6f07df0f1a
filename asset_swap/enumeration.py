"""
Canonical enumeration of candidate allocations.

Candidates are generated relative to the initial allocation through delta
vectors: candidate ``k`` is ``initial XOR delta_k`` where bit ``i`` of ``k``
(asset 0 being the least significant bit) is ``delta_k[i]``. The order is
part of the negotiation contract, since the final leader depends on which
mutually improving candidate is seen first.
"""

from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np

from .models import AssetLayout


def delta_for(k: int, n: int) -> np.ndarray:
    """Return the ``n``-bit delta vector for candidate index ``k``."""
    if n < 0:
        raise ValueError("asset count must be non-negative")
    if not 0 <= k < (1 << n):
        raise ValueError(f"candidate index {k} out of range for {n} assets")
    # Python ints keep this exact for any n.
    return np.fromiter(((k >> i) & 1 for i in range(n)), dtype=np.int8, count=n)


def initial_allocation(n0: int, n1: int) -> np.ndarray:
    return AssetLayout(n0=n0, n1=n1).initial_allocation()


class DeltaEnumerator:
    """Restartable stream of all ``2**n`` delta vectors in increasing ``k``.

    Each call to ``iter()`` starts again at ``k = 0`` and only one vector is
    alive at a time, so memory stays linear in ``n``.
    """

    def __init__(self, n: int):
        if n < 0:
            raise ValueError("asset count must be non-negative")
        self.n = n

    @property
    def count(self) -> int:
        return 1 << self.n

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[np.ndarray]:
        for k in range(self.count):
            yield delta_for(k, self.n)

    def __repr__(self) -> str:
        return f"DeltaEnumerator(n={self.n})"


def iter_candidates(initial: np.ndarray) -> Iterator[Tuple[int, np.ndarray]]:
    """Yield ``(k, initial XOR delta_k)`` for every candidate in canonical order."""
    initial = np.asarray(initial, dtype=np.int8)
    for k, delta in enumerate(DeltaEnumerator(len(initial))):
        yield k, np.bitwise_xor(initial, delta)
