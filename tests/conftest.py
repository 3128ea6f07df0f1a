"""Shared pytest fixtures for asset swap tests."""

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


from asset_swap.models import AssetLayout, ValuationTable


@pytest.fixture
def no_conflict():
    """Each party values only its own original assets."""
    layout = AssetLayout(n0=3, n1=2)
    valuation = ValuationTable(
        party0=[10, 10, 10, 0, 0],
        party1=[0, 0, 0, 10, 10],
    )
    return layout, valuation


@pytest.fixture
def card_trade():
    """Party 1 covets party 0's only asset and cares little for most of its own."""
    layout = AssetLayout(n0=1, n1=5)
    valuation = ValuationTable(
        party0=[100, 30, 30, 30, 30, 30],
        party1=[1000, 6, 8, 3, 5, 1],
    )
    return layout, valuation


@pytest.fixture
def mirrored_tie():
    """Swapping the two assets leaves both totals exactly unchanged."""
    layout = AssetLayout(n0=1, n1=1)
    valuation = ValuationTable(party0=[5, 5], party1=[5, 5])
    return layout, valuation


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running scan and batch tests")
