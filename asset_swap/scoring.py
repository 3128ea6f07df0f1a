"""
Valuation scoring.

Each party's score is the sum of its own valuations over the assets it
receives. Scoring is a fixed mask-and-sum over every asset: the work done
depends only on the public asset count, never on owner bits or values.
"""

from __future__ import annotations

import numpy as np

from .models import ConfigurationError, Score, ValuationTable


def ownership_masks(allocation: np.ndarray) -> tuple:
    """Return the 0/1 masks of assets granted to party 0 and party 1."""
    mask1 = np.asarray(allocation, dtype=np.int64)
    mask0 = 1 - mask1
    return mask0, mask1


def score(allocation: np.ndarray, valuation: ValuationTable) -> Score:
    """Score an allocation from each party's own perspective.

    Args:
        allocation: Owner label (0 or 1) for every asset.
        valuation: Private valuation vectors of both parties.

    Returns:
        Score: ``party0`` is party 0's valuation of the assets labelled 0 and
        ``party1`` is party 1's valuation of the assets labelled 1.

    Raises:
        ConfigurationError: If the allocation length does not match the
            valuation table.
    """
    if len(allocation) != valuation.n:
        raise ConfigurationError(
            f"allocation covers {len(allocation)} assets but valuations cover {valuation.n}"
        )
    mask0, mask1 = ownership_masks(allocation)
    return Score(
        party0=int(np.dot(valuation.party0, mask0)),
        party1=int(np.dot(valuation.party1, mask1)),
    )
