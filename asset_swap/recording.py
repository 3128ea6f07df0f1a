from __future__ import annotations

from typing import List

import numpy as np

from .models import Score, ScanStep


class ScanRecorder:
    """Collects one step per visited candidate for plaintext auditing."""

    def __init__(self) -> None:
        self._steps: List[ScanStep] = []

    def record_step(
        self,
        k: int,
        allocation: np.ndarray,
        candidate_score: Score,
        take: int,
        leader_score: Score,
    ) -> None:
        self._steps.append(
            ScanStep(
                k=k,
                allocation=[int(x) for x in allocation],
                score=candidate_score,
                accepted=bool(take),
                leader_score=leader_score,
            )
        )

    def accepted_steps(self) -> List[ScanStep]:
        return [s for s in self._steps if s.accepted]

    def transcript(self) -> List[ScanStep]:
        return list(self._steps)

    def __len__(self) -> int:
        return len(self._steps)
