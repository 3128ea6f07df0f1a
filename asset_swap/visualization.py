"""
Visualization of negotiation scans.
Plots each party's candidate scores and the running leader score.
"""

from pathlib import Path
from typing import List, Optional

import matplotlib.pyplot as plt
import pandas as pd

from .models import NegotiationOutcome, ScanStep


def scan_frame(transcript: List[ScanStep]) -> pd.DataFrame:
    """Flatten a scan transcript into one row per candidate."""
    rows = []
    for step in transcript:
        rows.append({
            'k': step.k,
            'allocation': ''.join(str(x) for x in step.allocation),
            'party0': step.score.party0,
            'party1': step.score.party1,
            'leader_party0': step.leader_score.party0,
            'leader_party1': step.leader_score.party1,
            'accepted': step.accepted,
        })
    return pd.DataFrame(rows, columns=[
        'k', 'allocation', 'party0', 'party1',
        'leader_party0', 'leader_party1', 'accepted',
    ])


def plot_scan_trajectory(outcome: NegotiationOutcome,
                         names: Optional[List[str]] = None,
                         save_path: Optional[Path] = None,
                         show: bool = True) -> Optional[plt.Figure]:
    """
    Plot candidate scores and the leader score across the scan.

    The parties' scores are in unrelated units, so each party gets its own
    axis. Returns ``None`` when the outcome carries no transcript.
    """
    if not outcome.transcript:
        return None

    df = scan_frame(outcome.transcript)
    names = names or ['party0', 'party1']

    fig, axes = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

    for party, ax in enumerate(axes):
        col = f'party{party}'
        ax.scatter(df['k'], df[col], s=8, alpha=0.4, label='Candidate score')
        ax.step(df['k'], df[f'leader_{col}'], where='post',
                color='green', linewidth=2, label='Leader score')

        accepted = df[df['accepted'] & (df['k'] > 0)]
        ax.scatter(accepted['k'], accepted[col], marker='*', s=120,
                   color='gold', edgecolor='black', zorder=3, label='Leader change')

        ax.axhline(y=outcome.initial_score[party], color='red',
                   linestyle='--', alpha=0.6, label='Initial score')
        ax.set_ylabel(f'{names[party]} valuation')
        ax.legend(loc='best', framealpha=0.9)
        ax.grid(True, alpha=0.3)

    axes[-1].set_xlabel('Candidate k')
    fig.suptitle('Asset Swap Scan', fontsize=14, fontweight='bold')
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
    if show:
        plt.show()

    return fig
