from .codec import AllocationCodec, MemoryIO, SwapIO, layout_from_counts, run_swap
from .enumeration import DeltaEnumerator, delta_for, initial_allocation, iter_candidates
from .models import (
    AssetLayout,
    ConfigurationError,
    NegotiationOutcome,
    Score,
    SwapConfig,
    ValuationTable,
)
from .protocol import BatchSwapRunner, NegotiationEngine, negotiate
from .scoring import score

__all__ = [
    "AllocationCodec",
    "AssetLayout",
    "BatchSwapRunner",
    "ConfigurationError",
    "DeltaEnumerator",
    "MemoryIO",
    "NegotiationEngine",
    "NegotiationOutcome",
    "Score",
    "SwapConfig",
    "SwapIO",
    "ValuationTable",
    "delta_for",
    "initial_allocation",
    "iter_candidates",
    "layout_from_counts",
    "negotiate",
    "run_swap",
    "score",
]
