"""
Core data models for the asset swap negotiation.
Defines the asset layout, valuation tables, scores and negotiation outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import Dict, List, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


PARTIES = (0, 1)

# Scores are int64 sums of a party's valuations.
INT64_MIN = int(np.iinfo(np.int64).min)
INT64_MAX = int(np.iinfo(np.int64).max)


class ConfigurationError(ValueError):
    """Raised when negotiation inputs have the wrong shape or content."""


# ===== SCORES =====

@dataclass(frozen=True, order=False)
class Score:
    """Each party's own valuation of what it receives under an allocation.

    The two totals are in unrelated units, so a score defines no ordering
    and cannot be iterated, summed or sorted. Compare scores only through
    :meth:`weakly_dominates`.
    """

    party0: int
    party1: int

    __iter__ = None  # type: ignore[assignment]

    def __getitem__(self, party: int) -> int:
        if party == 0:
            return self.party0
        if party == 1:
            return self.party1
        raise IndexError(f"no such party: {party}")

    def dominance_bit(self, other: "Score") -> int:
        """Return 1 if this score is >= ``other`` for both parties, else 0."""
        return int(self.party0 >= other.party0) & int(self.party1 >= other.party1)

    def weakly_dominates(self, other: "Score") -> bool:
        return bool(self.dominance_bit(other))

    def strictly_dominates(self, other: "Score") -> bool:
        """Weak dominance with at least one party strictly better off."""
        return self.weakly_dominates(other) and self != other

    def to_dict(self) -> Dict[str, int]:
        return {"party0": self.party0, "party1": self.party1}


# ===== ASSETS & VALUATIONS =====

class AssetLayout(BaseModel):
    """Public split of assets between their original owners.

    Assets ``0..n0-1`` start with party 0 and ``n0..n-1`` with party 1.
    """

    model_config = ConfigDict(frozen=True)

    n0: int = Field(0, ge=0)
    n1: int = Field(0, ge=0)

    @property
    def n(self) -> int:
        return self.n0 + self.n1

    def owner_of(self, index: int) -> int:
        if not 0 <= index < self.n:
            raise IndexError(f"asset index {index} out of range for {self.n} assets")
        return 0 if index < self.n0 else 1

    def asset_id(self, index: int) -> str:
        owner = self.owner_of(index)
        local = index if owner == 0 else index - self.n0
        return f"party{owner}_asset{local}"

    def asset_ids(self) -> List[str]:
        return [self.asset_id(i) for i in range(self.n)]

    def initial_allocation(self) -> np.ndarray:
        return np.concatenate([
            np.zeros(self.n0, dtype=np.int8),
            np.ones(self.n1, dtype=np.int8),
        ])


@dataclass(frozen=True)
class ValuationTable:
    """Per-party private valuation vectors over every asset.

    Vectors are stored read-only; entries of ``party0`` and ``party1`` are
    never combined with each other. Values must be integers, and the sum of
    a party's absolute values must fit in int64 so that no score can wrap.
    """

    party0: np.ndarray
    party1: np.ndarray

    def __post_init__(self):
        for party, values in ((0, self.party0), (1, self.party1)):
            object.__setattr__(self, f"party{party}", _valuation_vector(party, values))
        if len(self.party0) != len(self.party1):
            raise ConfigurationError(
                f"valuation vectors differ in length: "
                f"party0 has {len(self.party0)}, party1 has {len(self.party1)}"
            )

    @property
    def n(self) -> int:
        return len(self.party0)

    def for_party(self, party: int) -> np.ndarray:
        if party not in PARTIES:
            raise IndexError(f"no such party: {party}")
        return self.party0 if party == 0 else self.party1


def _valuation_vector(party: int, values) -> np.ndarray:
    # Checked as Python objects before the int64 cast.
    raw = np.array(values, dtype=object)
    if raw.ndim != 1:
        raise ConfigurationError(f"party{party} valuations must be a flat vector")
    items = raw.tolist()

    bad = [i for i, v in enumerate(items) if isinstance(v, bool) or not isinstance(v, Integral)]
    if bad:
        raise ConfigurationError(
            f"party{party} valuations must be integers; non-integers at positions {bad}"
        )

    bound = sum(abs(int(v)) for v in items)
    if bound > INT64_MAX:
        raise ConfigurationError(
            f"party{party} valuations can total {bound}, beyond the 64-bit score range"
        )

    arr = np.array([int(v) for v in items], dtype=np.int64)
    arr.flags.writeable = False
    return arr


# ===== SCENARIO CONFIGURATION =====

# Strict so that YAML floats and numeric strings are rejected, not coerced.
Valuations = Union[List[StrictInt], Dict[str, StrictInt]]


class PartySpec(BaseModel):
    """One party as described in a scenario file."""

    name: str
    assets: int = Field(0, ge=0)
    valuations: Valuations = Field(default_factory=list)


class SwapConfig(BaseModel):
    """A complete two-party swap scenario."""

    name: str = "asset_swap"
    description: Optional[str] = None
    party0: PartySpec
    party1: PartySpec

    @field_validator("party1")
    @classmethod
    def _distinct_names(cls, v: PartySpec, info):
        other = info.data.get("party0")
        if other is not None and other.name == v.name:
            raise ValueError("parties must have distinct names")
        return v

    @property
    def layout(self) -> AssetLayout:
        return AssetLayout(n0=self.party0.assets, n1=self.party1.assets)

    def party_names(self) -> List[str]:
        return [self.party0.name, self.party1.name]


# ===== SCAN RECORDS & OUTCOMES =====

@dataclass
class ScanStep:
    """One visited candidate of a scan."""

    k: int
    allocation: List[int]
    score: Score
    accepted: bool
    leader_score: Score

    def to_dict(self) -> dict:
        return {
            "k": self.k,
            "allocation": self.allocation,
            "score": self.score.to_dict(),
            "accepted": self.accepted,
            "leader_score": self.leader_score.to_dict(),
        }


class NegotiationOutcome(BaseModel):
    """Final result of one exhaustive negotiation scan."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    layout: AssetLayout
    allocation: List[int]
    initial_score: Score
    final_score: Score
    candidates_scanned: int
    leader_changes: int = 0
    transcript: Optional[List[ScanStep]] = None

    def swapped_assets(self) -> List[int]:
        """Indices of assets that end up with the party that did not own them."""
        initial = self.layout.initial_allocation()
        return [i for i, owner in enumerate(self.allocation) if owner != initial[i]]

    def gain(self, party: int) -> int:
        return self.final_score[party] - self.initial_score[party]

    def summary(self) -> str:
        moved = self.swapped_assets()
        if not moved:
            return f"No swap: initial allocation kept after {self.candidates_scanned} candidates."
        return (
            f"Swap agreed: {len(moved)} of {self.layout.n} assets change hands "
            f"after {self.candidates_scanned} candidates "
            f"(party0 +{self.gain(0)}, party1 +{self.gain(1)})."
        )

    def to_dict(self, names: Optional[List[str]] = None) -> dict:
        data = {
            "allocation": list(self.allocation),
            "assets": dict(zip(self.layout.asset_ids(), self.allocation)),
            "initial_score": self.initial_score.to_dict(),
            "final_score": self.final_score.to_dict(),
            "candidates_scanned": self.candidates_scanned,
            "leader_changes": self.leader_changes,
            "swapped_assets": self.swapped_assets(),
        }
        if names:
            data["parties"] = list(names)
        if self.transcript is not None:
            data["transcript"] = [step.to_dict() for step in self.transcript]
        return data
