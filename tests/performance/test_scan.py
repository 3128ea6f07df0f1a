"""Performance-oriented tests for the exhaustive scan."""

import time

import numpy as np
import pytest

from asset_swap.models import AssetLayout
from asset_swap.protocol import BatchSwapRunner, negotiate
from asset_swap.utilities import random_valuations


@pytest.mark.slow
def test_twelve_asset_scan():
    """4096 candidates should stay well within interactive limits."""
    rng = np.random.default_rng(42)
    layout = AssetLayout(n0=6, n1=6)
    valuation = random_valuations(layout, rng)

    start_time = time.time()
    outcome = negotiate(layout, valuation)
    elapsed = time.time() - start_time

    assert outcome.candidates_scanned == 4096
    assert elapsed < 30


@pytest.mark.slow
def test_batch_performance():
    start_time = time.time()
    runner = BatchSwapRunner(AssetLayout(n0=3, n1=3), seed=1)
    results = runner.run_batch(100)
    elapsed = time.time() - start_time

    assert len(results) == 100
    assert elapsed < 30
