"""
Command-line interface for the asset swap negotiation.
Provides commands to negotiate scenarios, inspect the candidate order, and analyze outcomes.
"""

import json
import logging
import logging.config
from pathlib import Path
from typing import List, Optional, Tuple

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import track
from rich.table import Table

from .codec import AllocationCodec, layout_from_counts
from .config import settings
from .enumeration import iter_candidates
from .models import (
    AssetLayout,
    ConfigurationError,
    NegotiationOutcome,
    SwapConfig,
    ValuationTable,
)
from .protocol import BatchSwapRunner, negotiate
from .utilities import analyze_allocation_space, is_pareto_optimal
from .visualization import plot_scan_trajectory

app = typer.Typer(help="Private two-party asset swap negotiation")
console = Console()
logger = logging.getLogger(__name__)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL")
):
    """Negotiate fair swaps of indivisible assets between two parties."""
    logging_config = settings.get_logging_config()
    if log_level:
        logging_config['root']['level'] = log_level.upper()
    logging.config.dictConfig(logging_config)


# ===== COMMANDS =====

@app.command()
def run(
    config_file: Path = typer.Argument(..., help="Path to YAML scenario file"),
    output: Optional[Path] = typer.Option(None, help="Output file for results (.json or .yaml)"),
    trace: bool = typer.Option(False, "--trace", help="Record every visited candidate"),
    visualize: bool = typer.Option(False, "--viz", help="Show scan visualization"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output")
):
    """Negotiate a single swap scenario."""

    console.print(f"[cyan]Loading scenario from {config_file}...[/cyan]")
    config, layout, valuation = load_scenario(config_file)

    console.print(f"[yellow]Scanning {1 << layout.n} candidate allocations...[/yellow]")
    outcome = negotiate(layout, valuation, record=trace or visualize)

    display_outcome(outcome, config, verbose)

    if output:
        save_outcome(outcome, config, output)
        console.print(f"[green]Results saved to {output}[/green]")

    if visualize:
        plot_scan_trajectory(outcome, names=config.party_names())


@app.command("enumerate")
def enumerate_candidates(
    n0: int = typer.Argument(..., help="Assets originally owned by party 0"),
    n1: int = typer.Argument(..., help="Assets originally owned by party 1"),
    limit: int = typer.Option(16, help="Maximum number of candidates to list")
):
    """Show the canonical candidate order for a layout."""

    layout = _checked(layout_from_counts, n0, n1)
    initial = layout.initial_allocation()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("k", justify="right")
    table.add_column("Delta (asset 0 first)")
    table.add_column("Candidate")

    for k, candidate in iter_candidates(initial):
        if k >= limit:
            break
        delta = candidate ^ initial
        table.add_row(str(k), _bits(delta), _bits(candidate))

    console.print(table)
    total = 1 << layout.n
    if total > limit:
        console.print(f"... {total - limit} more candidates")


@app.command()
def analyze(
    config_file: Path = typer.Argument(..., help="Path to YAML scenario file")
):
    """Analyze the candidate space of a scenario."""

    config, layout, valuation = load_scenario(config_file)
    console.print(f"[yellow]Analyzing {1 << layout.n} candidate allocations...[/yellow]")

    analysis = analyze_allocation_space(layout, valuation)
    outcome = negotiate(layout, valuation)
    pareto = is_pareto_optimal(outcome.allocation, layout, valuation)

    display_space_analysis(analysis, config)

    console.print(f"\nNegotiated allocation: {_bits(outcome.allocation)} (k={_index_of(outcome)})")
    status = "✅ Yes" if pareto else "❌ No"
    console.print(f"Pareto Optimal: {status}")


@app.command()
def batch(
    n0: int = typer.Option(3, help="Assets originally owned by party 0"),
    n1: int = typer.Option(3, help="Assets originally owned by party 1"),
    n_runs: int = typer.Option(100, help="Number of negotiations to run"),
    seed: int = typer.Option(settings.DEFAULT_SEED, help="Base random seed"),
    output: Optional[Path] = typer.Option(None, help="Output file for results")
):
    """Run negotiations over random valuations and summarize them."""

    layout = _checked(layout_from_counts, n0, n1)
    runner = BatchSwapRunner(
        layout,
        low=settings.DEFAULT_VALUATION_LOW,
        high=settings.DEFAULT_VALUATION_HIGH,
        seed=seed,
    )

    console.print(f"[yellow]Running {n_runs} negotiations...[/yellow]")
    results = []
    for i in track(range(n_runs), description="Negotiating..."):
        results.append(runner.run_one(i))
    runner.results = results

    analysis = runner.analyze_results()
    display_batch_analysis(analysis)

    if output:
        save_batch_results(results, analysis, output)
        console.print(f"[green]Results saved to {output}[/green]")


@app.command()
def example(
    directory: Path = typer.Option(Path("examples"), help="Directory for example scenarios")
):
    """Generate example scenario files."""

    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for filename, scenario in EXAMPLE_SCENARIOS.items():
        path = directory / filename
        with open(path, 'w') as f:
            yaml.safe_dump(scenario, f, default_flow_style=None, sort_keys=False)
        written.append(path)

    console.print(f"[green]Example scenarios created in {directory}/[/green]")
    for path in written:
        console.print(f"  - {path}")


# ===== HELPER FUNCTIONS =====

def load_config(config_file: Path) -> SwapConfig:
    """Load a scenario from a YAML file."""
    with open(config_file, 'r') as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file} does not contain a scenario mapping")
    return SwapConfig(**data)


def build_inputs(config: SwapConfig) -> Tuple[AssetLayout, ValuationTable]:
    """Run a scenario's counts and valuations through the codec."""
    layout = layout_from_counts(config.party0.assets, config.party1.assets)
    codec = AllocationCodec(layout)
    valuation = codec.decode_valuations(config.party0.valuations, config.party1.valuations)
    return layout, valuation


def load_scenario(config_file: Path) -> Tuple[SwapConfig, AssetLayout, ValuationTable]:
    try:
        config = load_config(config_file)
        layout, valuation = build_inputs(config)
    except (ConfigurationError, ValidationError, OSError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid scenario {config_file}: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    logger.info(f"Loaded scenario '{config.name}' with {layout.n} assets")
    return config, layout, valuation


def _checked(fn, *args):
    try:
        return fn(*args)
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def _bits(values) -> str:
    return ''.join(str(int(x)) for x in values) or '-'


def _index_of(outcome: NegotiationOutcome) -> int:
    initial = outcome.layout.initial_allocation()
    return sum(int(a != b) << i for i, (a, b) in enumerate(zip(outcome.allocation, initial)))


def display_outcome(outcome: NegotiationOutcome, config: SwapConfig, verbose: bool = False):
    """Display negotiation outcome in a formatted way."""

    console.print(f"\n[bold]{outcome.summary()}[/bold]")
    names = config.party_names()
    layout = outcome.layout

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Asset")
    table.add_column("Original owner")
    table.add_column("Final owner")
    for i, asset_id in enumerate(layout.asset_ids()):
        before = names[layout.owner_of(i)]
        after = names[outcome.allocation[i]]
        style = "green" if before != after else None
        table.add_row(asset_id, before, after, style=style)
    console.print(table)

    console.print("\n[cyan]Scores (each party in its own units):[/cyan]")
    scores = Table(show_header=True, header_style="bold magenta")
    scores.add_column("Party")
    scores.add_column("Initial", justify="right")
    scores.add_column("Final", justify="right")
    scores.add_column("Gain", justify="right")
    for party, name in enumerate(names):
        scores.add_row(
            name,
            str(outcome.initial_score[party]),
            str(outcome.final_score[party]),
            f"+{outcome.gain(party)}",
        )
    console.print(scores)

    if verbose:
        console.print(f"\nLeader changes: {outcome.leader_changes}")

    if verbose and outcome.transcript:
        console.print("\n[yellow]Leader changes during the scan:[/yellow]")
        for step in outcome.transcript:
            if step.accepted and step.k > 0:
                console.print(
                    f"  k={step.k}: {_bits(step.allocation)} "
                    f"-> ({step.score.party0}, {step.score.party1})"
                )


def display_space_analysis(analysis: dict, config: SwapConfig):
    """Display candidate space analysis."""
    console.print("\n[bold cyan]Candidate Space Analysis:[/bold cyan]")
    names = config.party_names()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    table.add_row("Candidates", str(analysis['candidates']))
    table.add_row("Mutually Improving", str(len(analysis['mutually_improving'])))
    table.add_row("Pareto-Optimal Improving", str(len(analysis['pareto_improving'])))
    table.add_row(f"Best for {names[0]}", str(analysis['best_party0']))
    table.add_row(f"Best for {names[1]}", str(analysis['best_party1']))

    console.print(table)

    if len(analysis['mutually_improving']) == 1:
        console.print("[red]❌ No allocation improves on the initial one for both parties.[/red]")


def display_batch_analysis(analysis: dict):
    """Display batch negotiation analysis."""
    console.print("\n[bold cyan]Batch Analysis Results:[/bold cyan]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    table.add_row("Total Runs", str(analysis['count']))
    table.add_row("Swap Rate", f"{analysis['swap_rate']:.1%}")
    table.add_row("Average Assets Moved", f"{analysis['avg_assets_moved']:.2f}")
    table.add_row("Average Leader Changes", f"{analysis['avg_leader_changes']:.2f}")
    table.add_row("Average Gain (party0)", f"{analysis['avg_gain_party0']:.2f}")
    table.add_row("Average Gain (party1)", f"{analysis['avg_gain_party1']:.2f}")

    console.print(table)


def save_outcome(outcome: NegotiationOutcome, config: SwapConfig, output_path: Path):
    """Save negotiation outcome to file."""
    data = outcome.to_dict(names=config.party_names())
    data['scenario'] = config.name

    if output_path.suffix == '.json':
        with open(output_path, 'w') as f:
            json.dump(data, f, indent=2)
    else:
        with open(output_path, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False)


def save_batch_results(results: List[NegotiationOutcome], analysis: dict, output_path: Path):
    """Save batch results to file."""
    data = {
        'analysis': analysis,
        'outcomes': [
            {
                'allocation': r.allocation,
                'initial_score': r.initial_score.to_dict(),
                'final_score': r.final_score.to_dict(),
                'leader_changes': r.leader_changes,
            }
            for r in results
        ]
    }

    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)


# ===== EXAMPLE SCENARIOS =====

EXAMPLE_SCENARIOS = {
    'no_conflict.yaml': {
        'name': 'no_conflict',
        'description': 'Each party only values what it already owns.',
        'party0': {'name': 'Alice', 'assets': 3, 'valuations': [10, 10, 10, 0, 0]},
        'party1': {'name': 'Bob', 'assets': 2, 'valuations': [0, 0, 0, 10, 10]},
    },
    'card_trade.yaml': {
        'name': 'card_trade',
        'description': 'Bob covets Alice\'s single card and will part with most of his.',
        'party0': {'name': 'Alice', 'assets': 1, 'valuations': [100, 30, 30, 30, 30, 30]},
        'party1': {'name': 'Bob', 'assets': 5, 'valuations': [1000, 6, 8, 3, 5, 1]},
    },
    'subsidiaries.yaml': {
        'name': 'subsidiaries',
        'description': 'Valuations keyed by asset id.',
        'party0': {
            'name': 'Northwind',
            'assets': 2,
            'valuations': {
                'party0_asset0': 40, 'party0_asset1': 10,
                'party1_asset0': 35, 'party1_asset1': 5,
            },
        },
        'party1': {
            'name': 'Contoso',
            'assets': 2,
            'valuations': {
                'party0_asset0': 20, 'party0_asset1': 30,
                'party1_asset0': 15, 'party1_asset1': 25,
            },
        },
    },
}


if __name__ == "__main__":
    app()
