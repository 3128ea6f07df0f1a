"""
Allocation codec and secure-computation boundary.

Maps between the flat asset index space used by the engine and the external
per-asset identifiers (``party0_asset0``, ``party1_asset2``, ...) seen by the
host runtime. All shape checks happen here, before any scan starts.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from numbers import Integral
from typing import Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
from pydantic import ValidationError

from .config import settings
from .models import (
    INT64_MAX,
    INT64_MIN,
    AssetLayout,
    ConfigurationError,
    NegotiationOutcome,
    ValuationTable,
)
from .protocol import negotiate

logger = logging.getLogger(__name__)

PUBLIC_COUNT_IDS = ("n0", "n1")
PARTY_IDS = ("party0", "party1")

RawValuations = Union[Sequence[int], Mapping[str, int]]


def layout_from_counts(n0: int, n1: int, max_assets: Optional[int] = None) -> AssetLayout:
    """Derive the public asset layout from each party's declared asset count.

    Raises:
        ConfigurationError: For negative or non-integer counts, or a total
            above ``max_assets`` (defaults to ``settings.MAX_ASSETS``).
    """
    for name, count in (("n0", n0), ("n1", n1)):
        if isinstance(count, bool) or not isinstance(count, Integral):
            raise ConfigurationError(f"{name} must be an integer, got {count!r}")
    try:
        layout = AssetLayout(n0=int(n0), n1=int(n1))
    except ValidationError as exc:
        raise ConfigurationError(f"invalid asset counts n0={n0}, n1={n1}") from exc

    limit = settings.MAX_ASSETS if max_assets is None else max_assets
    if layout.n > limit:
        raise ConfigurationError(
            f"{layout.n} assets exceed the configured ceiling of {limit}; "
            f"the exhaustive scan visits 2**n candidates"
        )
    return layout


class AllocationCodec:
    """Translate valuations and allocations at the system boundary."""

    def __init__(self, layout: AssetLayout):
        self.layout = layout
        self.asset_ids: List[str] = layout.asset_ids()
        self._index: Dict[str, int] = {a: i for i, a in enumerate(self.asset_ids)}

    # ---------- Inbound ----------
    def decode_valuations(self, party0: RawValuations, party1: RawValuations) -> ValuationTable:
        return ValuationTable(
            party0=self._decode_party(0, party0),
            party1=self._decode_party(1, party1),
        )

    def _decode_party(self, party: int, raw: RawValuations) -> np.ndarray:
        if isinstance(raw, Mapping):
            missing = [a for a in self.asset_ids if a not in raw]
            unknown = sorted(k for k in raw if k not in self._index)
            if missing or unknown:
                details = []
                if missing:
                    details.append(f"missing {missing}")
                if unknown:
                    details.append(f"unknown {unknown}")
                raise ConfigurationError(
                    f"party{party} valuations do not match the assets: " + ", ".join(details)
                )
            values = [raw[a] for a in self.asset_ids]
        else:
            values = list(raw)
            if len(values) != self.layout.n:
                raise ConfigurationError(
                    f"party{party} supplied {len(values)} valuations for {self.layout.n} assets"
                )

        bad = [
            self.asset_ids[i] for i, v in enumerate(values)
            if isinstance(v, bool) or not isinstance(v, Integral)
        ]
        if bad:
            raise ConfigurationError(f"party{party} valuations must be integers: {bad}")

        out_of_range = [
            self.asset_ids[i] for i, v in enumerate(values)
            if not INT64_MIN <= int(v) <= INT64_MAX
        ]
        if out_of_range:
            raise ConfigurationError(
                f"party{party} valuations outside the 64-bit range: {out_of_range}"
            )
        return np.array([int(v) for v in values], dtype=np.int64)

    def decode_allocation(self, labels: Mapping[str, int]) -> np.ndarray:
        missing = [a for a in self.asset_ids if a not in labels]
        if missing:
            raise ConfigurationError(f"allocation is missing assets {missing}")
        alloc = np.array([labels[a] for a in self.asset_ids], dtype=np.int8)
        if np.any((alloc != 0) & (alloc != 1)):
            raise ConfigurationError("owner labels must be 0 or 1")
        return alloc

    # ---------- Outbound ----------
    def encode_allocation(self, allocation: Sequence[int]) -> Dict[str, int]:
        if len(allocation) != self.layout.n:
            raise ConfigurationError(
                f"allocation covers {len(allocation)} assets, expected {self.layout.n}"
            )
        return {a: int(owner) for a, owner in zip(self.asset_ids, allocation)}


# ===== HOST RUNTIME BOUNDARY =====

class SwapIO(ABC):
    """Inputs and outputs supplied by the secure-computation host."""

    @abstractmethod
    def input(self, party: str, input_id: str) -> int:
        """Private input visible only to ``party``."""

    @abstractmethod
    def public_input(self, input_id: str) -> int: ...

    @abstractmethod
    def public_output(self, output_id: str, value: int) -> None: ...


class MemoryIO(SwapIO):
    """In-process IO backed by plain dictionaries."""

    def __init__(self, public_inputs: Mapping[str, int],
                 private_inputs: Mapping[str, Mapping[str, int]]):
        self.public_inputs = dict(public_inputs)
        self.private_inputs = {p: dict(v) for p, v in private_inputs.items()}
        self.outputs: Dict[str, int] = {}

    def input(self, party: str, input_id: str) -> int:
        try:
            return self.private_inputs[party][input_id]
        except KeyError:
            raise ConfigurationError(f"no private input {input_id!r} from {party!r}") from None

    def public_input(self, input_id: str) -> int:
        try:
            return self.public_inputs[input_id]
        except KeyError:
            raise ConfigurationError(f"no public input {input_id!r}") from None

    def public_output(self, output_id: str, value: int) -> None:
        self.outputs[output_id] = value


def run_swap(io: SwapIO, max_assets: Optional[int] = None) -> NegotiationOutcome:
    """Read inputs from ``io``, negotiate, and publish one owner per asset."""
    layout = layout_from_counts(
        io.public_input(PUBLIC_COUNT_IDS[0]),
        io.public_input(PUBLIC_COUNT_IDS[1]),
        max_assets=max_assets,
    )
    codec = AllocationCodec(layout)
    valuation = codec.decode_valuations(
        {a: io.input(PARTY_IDS[0], a) for a in codec.asset_ids},
        {a: io.input(PARTY_IDS[1], a) for a in codec.asset_ids},
    )

    outcome = negotiate(layout, valuation)
    for asset_id, owner in codec.encode_allocation(outcome.allocation).items():
        io.public_output(asset_id, owner)
    logger.info(f"Published {layout.n} owner labels")
    return outcome
